"""Default regions and known beaches."""

from surfcast.config.schema import BeachConfig, RegionConfig

DEFAULT_REGIONS: list[RegionConfig] = [
    RegionConfig(slug="gangreung", name="Gangneung", order=0),
    RegionConfig(slug="pohang", name="Pohang", order=1),
    RegionConfig(slug="jeju", name="Jeju", order=2),
    RegionConfig(slug="busan", name="Busan", order=3),
]

DEFAULT_BEACHES: list[BeachConfig] = [
    BeachConfig(id=1001, region="gangreung", name="Jumunjin"),
    BeachConfig(id=1002, region="gangreung", name="Geumjin"),
    BeachConfig(id=1003, region="gangreung", name="Anmok"),
    BeachConfig(id=1004, region="gangreung", name="Gyeongpo"),
    BeachConfig(id=2001, region="pohang", name="Wolpo"),
    BeachConfig(id=2002, region="pohang", name="Singang"),
    BeachConfig(id=3001, region="jeju", name="Jungmun"),
    BeachConfig(id=3002, region="jeju", name="Iho"),
    BeachConfig(id=3003, region="jeju", name="Woljeong"),
    BeachConfig(id=4001, region="busan", name="Songjeong"),
]
