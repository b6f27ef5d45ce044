# collectors/raspberry.py
from __future__ import annotations

from helper.parsing import get_value
from models.hardware import RaspberryInfo

MANUFACTURER = 'Raspberry Pi Foundation'

PI_HARDWARE = {'BCM2835', 'BCM2708', 'BCM2709', 'BCM2711', 'BCM2837'}

# revision code -> (type, revision, memory MB, manufacturer); all BCM2835
OLD_REVISIONS = {
    '0002': ('B', '1.0', 256, 'Egoman'),
    '0003': ('B', '1.0', 256, 'Egoman'),
    '0004': ('B', '2.0', 256, 'Sony UK'),
    '0005': ('B', '2.0', 256, 'Qisda'),
    '0006': ('B', '2.0', 256, 'Egoman'),
    '0007': ('A', '2.0', 256, 'Egoman'),
    '0008': ('A', '2.0', 256, 'Sony UK'),
    '0009': ('A', '2.0', 256, 'Qisda'),
    '000d': ('B', '2.0', 512, 'Egoman'),
    '000e': ('B', '2.0', 512, 'Sony UK'),
    '000f': ('B', '2.0', 512, 'Egoman'),
    '0010': ('B+', '1.2', 512, 'Sony UK'),
    '0011': ('CM1', '1.0', 512, 'Sony UK'),
    '0012': ('A+', '1.1', 256, 'Sony UK'),
    '0013': ('B+', '1.2', 512, 'Embest'),
    '0014': ('CM1', '1.0', 512, 'Embest'),
    '0015': ('A+', '1.1', 256, 'Embest'),
}

MANUFACTURERS = ['Sony UK', 'Egoman', 'Embest', 'Sony Japan', 'Embest', 'Stadium']
PROCESSORS = ['BCM2835', 'BCM2836', 'BCM2837', 'BCM2711']
TYPES = {
    0x00: 'A',
    0x01: 'B',
    0x02: 'A+',
    0x03: 'B+',
    0x04: '2B',
    0x05: 'Alpha',
    0x06: 'CM1',
    0x08: '3B',
    0x09: 'Zero',
    0x0a: 'CM3',
    0x0c: 'Zero W',
    0x0d: '3B+',
    0x0e: '3A+',
    0x0f: 'Internal use only',
    0x10: 'CM3+',
    0x11: '4B',
    0x12: 'Zero 2 W',
    0x13: '400',
    0x14: 'CM4',
}


def decode_revision(code: str) -> dict:
    """
    Decodes a board revision from /proc/cpuinfo.

    Codes with bit 23 set use the new-style bit field:
        NOQu uuWu FMMM CCCC PPPP TTTT TTTT RRRR
    anything else (including overvoltage variants such as '1000002') is
    looked up in the old table by its last four digits. Unknown values come
    back as ''.
    """
    code = (code or '').strip().lower()
    try:
        value = int(code, 16)
    except ValueError:
        return {'type': '', 'revision': '', 'memory': 0, 'manufacturer': '', 'processor': ''}

    if not (value >> 23) & 1:
        kind, revision, memory, manufacturer = OLD_REVISIONS.get(code[-4:], ('', '', 0, ''))
        return {
            'type': kind,
            'revision': revision,
            'memory': memory,
            'manufacturer': manufacturer,
            'processor': 'BCM2835' if kind else '',
        }

    manufacturer = (value >> 16) & 0xF
    processor = (value >> 12) & 0xF
    return {
        'type': TYPES.get((value >> 4) & 0xFF, ''),
        'revision': f"1.{value & 0xF}",
        'memory': 256 * 2 ** ((value >> 20) & 7),
        'manufacturer': MANUFACTURERS[manufacturer] if manufacturer < len(MANUFACTURERS) else '',
        'processor': PROCESSORS[processor] if processor < len(PROCESSORS) else '',
    }


def is_raspberry(lines: list[str]) -> bool:
    hardware = get_value(lines, 'hardware')
    model = get_value(lines, 'model')
    return hardware in PI_HARDWARE and 'raspberry' in model.lower()


def decode_pi_cpuinfo(lines: list[str]) -> dict:
    """
    Returns SystemIdentity fields for a Raspberry Pi, or {} for anything else.
    """
    if not is_raspberry(lines):
        return {}

    revision = get_value(lines, 'revision')
    decoded = decode_revision(revision)
    return {
        'manufacturer': MANUFACTURER,
        'model': get_value(lines, 'model'),
        'version': revision,
        'serial': get_value(lines, 'serial'),
        'raspberry': RaspberryInfo(
            manufacturer=decoded['manufacturer'],
            processor=decoded['processor'],
            type=decoded['type'],
            revision=decoded['revision'],
        ),
    }
