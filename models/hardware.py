from __future__ import annotations

from pydantic import Field

from models.record import Record

SENTINEL = '-'

# SMBIOS chassis types, index = code - 1
CHASSIS_TYPES = [
    'Other',
    'Unknown',
    'Desktop',
    'Low Profile Desktop',
    'Pizza Box',
    'Mini Tower',
    'Tower',
    'Portable',
    'Laptop',
    'Notebook',
    'Hand Held',
    'Docking Station',
    'All in One',
    'Sub Notebook',
    'Space-Saving',
    'Lunch Box',
    'Main System Chassis',
    'Expansion Chassis',
    'SubChassis',
    'Bus Expansion Chassis',
    'Peripheral Chassis',
    'Storage Chassis',
    'Rack Mount Chassis',
    'Sealed-Case PC',
    'Multi-System Chassis',
    'Compact PCI',
    'Advanced TCA',
    'Blade',
    'Blade Enclosure',
    'Tablet',
    'Convertible',
    'Detachable',
    'IoT Gateway',
    'Embedded PC',
    'Mini PC',
    'Stick PC',
]


def decode_chassis_type(code) -> str:
    """
    Maps a numeric SMBIOS chassis code (int or text such as '9' or '{9}') to its
    name. Out-of-range or non-numeric input yields ''.
    """
    if isinstance(code, int):
        number = code
    else:
        digits = ''.join(ch for ch in str(code or '') if ch.isdigit())
        if not digits:
            return ''
        number = int(digits)

    if 1 <= number <= len(CHASSIS_TYPES):
        return CHASSIS_TYPES[number - 1]
    return ''


class RaspberryInfo(Record):
    manufacturer: str = ''
    processor: str = ''
    type: str = ''
    revision: str = ''


class SystemIdentity(Record):
    manufacturer: str = ''
    model: str = 'Computer'
    version: str = ''
    serial: str = SENTINEL
    uuid: str = SENTINEL
    sku: str = SENTINEL
    virtual: bool = False
    raspberry: RaspberryInfo | None = None

    def to_json(self) -> dict:
        data = super().to_json()
        if self.raspberry is None:
            data.pop('raspberry')
        return data


class BiosInfo(Record):
    vendor: str = ''
    version: str = ''
    release_date: str = Field('', alias='releaseDate')
    revision: str = ''


class BaseboardInfo(Record):
    manufacturer: str = ''
    model: str = ''
    version: str = ''
    serial: str = SENTINEL
    asset_tag: str = Field(SENTINEL, alias='assetTag')


class ChassisInfo(Record):
    manufacturer: str = ''
    model: str = ''
    type: str = ''
    version: str = ''
    serial: str = SENTINEL
    asset_tag: str = Field(SENTINEL, alias='assetTag')
    sku: str = ''


def defaults_of(model: type[Record]) -> dict:
    """Field defaults keyed by python field name."""
    return {name: info.default for name, info in model.model_fields.items()}
