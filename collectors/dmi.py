# collectors/dmi.py
from __future__ import annotations

from collectors.base import BaseOSCollector
from collectors.pipeline import FallbackChain
from collectors.pipeline import ProbeStep
from collectors.raspberry import decode_pi_cpuinfo
from helper.parsing import is_placeholder
from helper.parsing import parse_release_date
from models.hardware import CHASSIS_TYPES
from models.hardware import BaseboardInfo
from models.hardware import BiosInfo
from models.hardware import ChassisInfo
from models.hardware import SystemIdentity
from models.hardware import decode_chassis_type
from models.hardware import defaults_of

DMI_DIR = '/sys/devices/virtual/dmi/id'
DMIDECODE = 'export LC_ALL=C; dmidecode -t {kind} 2>/dev/null; unset LC_ALL'
DMESG_HYPERVISOR = 'dmesg 2>/dev/null | grep -iE "virtual|hypervisor" | grep -iE "vmware|qemu|kvm|xen"'

VIRTUAL_MODELS = {'virtualbox', 'kvm', 'virtual machine', 'bochs'}
DISK_MARKERS = ('_QEMU_', '_VBOX_')
CONTAINER_MARKERS = ('/.dockerenv', '/.dockerinit')
# /proc/1/cgroup path fragment -> model
CGROUP_MARKERS = [
    ('kubepods', 'Kubernetes Pod'),
    ('libpod', 'Podman Container'),
    ('docker', 'Docker Container'),
    ('lxc', 'LXC Container'),
]


def clean(values: dict) -> dict:
    """Drops vendor placeholders ('To Be Filled By O.E.M.') so later probes can fill the field."""
    return {k: '' if isinstance(v, str) and is_placeholder(v) else v for k, v in values.items()}


class DmiCollector(BaseOSCollector):
    """
    Hardware collector for hosts exposing SMBIOS through dmidecode and/or the
    /sys/devices/virtual/dmi/id pseudo-files (Linux and the BSDs).

    Every record is filled by a FallbackChain: dmidecode first, sysfs second.
    dmidecode usually needs root; sysfs is world readable for most fields.
    """

    shell_probes = True

    async def dmidecode(self, kind: str) -> list[str]:
        result = await self.runner.run(DMIDECODE.format(kind=kind))
        return [] if result.failed else result.lines()

    def sysfs(self, name: str) -> str:
        return self.runner.read_text(f"{DMI_DIR}/{name}").strip()

    def sysfs_values(self, names: dict[str, str]) -> dict:
        return {field: self.sysfs(name) for field, name in names.items()}

    def not_arm(self, record: dict) -> bool:
        return self.host.arch != 'arm'

    # ------------------------------
    # SYSTEM
    # ------------------------------
    def system_chain(self) -> FallbackChain:
        return FallbackChain([
            ProbeStep('dmidecode', self._system_dmidecode),
            ProbeStep('sysfs', self._system_sysfs),
        ], defaults_of(SystemIdentity))

    def heuristics_chain(self) -> FallbackChain:
        return FallbackChain([
            ProbeStep('hypervisor-signature', self._hypervisor_signature),
            ProbeStep('disk-by-id', self._disk_by_id, when=lambda r: not r.get('virtual')),
            ProbeStep('container', self._container, overwrite=True),
            ProbeStep('dmesg', self._dmesg, when=self.unidentified),
            ProbeStep('raspberry', self._raspberry, when=self.unidentified),
        ], defaults_of(SystemIdentity))

    @staticmethod
    def unidentified(record: dict) -> bool:
        return not record.get('manufacturer') and record.get('model') == 'Computer' and not record.get('version')

    async def system(self) -> SystemIdentity:
        defaults = defaults_of(SystemIdentity)
        record = await self.system_chain().run(dict(defaults))

        for field, default in defaults.items():
            if isinstance(record[field], str) and (not record[field] or is_placeholder(record[field])):
                record[field] = default
        if record['uuid'] != defaults['uuid']:
            record['uuid'] = record['uuid'].lower()

        record = await self.heuristics_chain().run(record)
        return SystemIdentity(**record)

    async def _system_dmidecode(self, record: dict) -> dict:
        lines = await self.dmidecode('system')
        return clean(self.values(lines, {
            'manufacturer': 'manufacturer',
            'model': 'product name',
            'version': 'version',
            'serial': 'serial number',
            'uuid': 'uuid',
            'sku': 'sku number',
        }))

    async def _system_sysfs(self, record: dict) -> dict:
        return clean(self.sysfs_values({
            'manufacturer': 'sys_vendor',
            'model': 'product_name',
            'version': 'product_version',
            'serial': 'product_serial',
            'uuid': 'product_uuid',
        }))

    async def _hypervisor_signature(self, record: dict) -> dict:
        model = record['model'].lower()
        manufacturer = record['manufacturer'].lower()
        if (
            model in VIRTUAL_MODELS
            or model.startswith('vmware')
            or manufacturer.startswith('vmware')
            or manufacturer == 'xen'
        ):
            return {'virtual': True}
        return {}

    async def _disk_by_id(self, record: dict) -> dict:
        entries = self.runner.list_dir('/dev/disk/by-id')
        if any(marker in entry for entry in entries for marker in DISK_MARKERS):
            return {'virtual': True}
        return {}

    async def _container(self, record: dict) -> dict:
        if any(self.runner.exists(path) for path in CONTAINER_MARKERS):
            return {'model': 'Docker Container', 'virtual': True}
        cgroup = self.runner.read_text('/proc/1/cgroup').lower()
        for marker, model in CGROUP_MARKERS:
            if marker in cgroup:
                return {'model': model, 'virtual': True}
        return {}

    async def _dmesg(self, record: dict) -> dict:
        result = await self.runner.run(DMESG_HYPERVISOR)
        if not result.failed and result.stdout.strip():
            return {'model': 'Virtual machine', 'virtual': True}
        return {}

    async def _raspberry(self, record: dict) -> dict:
        return decode_pi_cpuinfo(self.runner.read_text('/proc/cpuinfo').splitlines())

    # ------------------------------
    # BIOS
    # ------------------------------
    def bios_chain(self) -> FallbackChain:
        return FallbackChain([
            ProbeStep('dmidecode', self._bios_dmidecode, when=self.not_arm),
            ProbeStep('sysfs', self._bios_sysfs),
        ], defaults_of(BiosInfo))

    async def bios(self) -> BiosInfo:
        record = await self.bios_chain().run(defaults_of(BiosInfo))
        return BiosInfo(**record)

    async def _bios_dmidecode(self, record: dict) -> dict:
        lines = await self.dmidecode('0')
        found = self.values(lines, {
            'vendor': 'vendor',
            'version': 'version',
            'release_date': 'release date',
            'revision': 'bios revision',
        })
        found['release_date'] = parse_release_date(found['release_date'])
        return clean(found)

    async def _bios_sysfs(self, record: dict) -> dict:
        found = self.sysfs_values({
            'vendor': 'bios_vendor',
            'version': 'bios_version',
            'release_date': 'bios_date',
            'revision': 'bios_release',
        })
        found['release_date'] = parse_release_date(found['release_date'])
        return clean(found)

    # ------------------------------
    # BASEBOARD
    # ------------------------------
    def baseboard_chain(self) -> FallbackChain:
        return FallbackChain([
            ProbeStep('dmidecode', self._baseboard_dmidecode, when=self.not_arm),
            ProbeStep('sysfs', self._baseboard_sysfs),
        ], defaults_of(BaseboardInfo))

    async def baseboard(self) -> BaseboardInfo:
        record = await self.baseboard_chain().run(defaults_of(BaseboardInfo))
        return BaseboardInfo(**record)

    async def _baseboard_dmidecode(self, record: dict) -> dict:
        lines = await self.dmidecode('2')
        return clean(self.values(lines, {
            'manufacturer': 'manufacturer',
            'model': 'product name',
            'version': 'version',
            'serial': 'serial number',
            'asset_tag': 'asset tag',
        }))

    async def _baseboard_sysfs(self, record: dict) -> dict:
        return clean(self.sysfs_values({
            'manufacturer': 'board_vendor',
            'model': 'board_name',
            'version': 'board_version',
            'serial': 'board_serial',
            'asset_tag': 'board_asset_tag',
        }))

    # ------------------------------
    # CHASSIS
    # ------------------------------
    def chassis_chain(self) -> FallbackChain:
        return FallbackChain([
            ProbeStep('dmidecode', self._chassis_dmidecode),
            ProbeStep('sysfs', self._chassis_sysfs),
        ], defaults_of(ChassisInfo))

    async def chassis(self) -> ChassisInfo:
        record = await self.chassis_chain().run(defaults_of(ChassisInfo))
        return ChassisInfo(**record)

    async def _chassis_dmidecode(self, record: dict) -> dict:
        lines = await self.dmidecode('3')
        found = self.values(lines, {
            'manufacturer': 'manufacturer',
            'type': 'type',
            'version': 'version',
            'serial': 'serial number',
            'asset_tag': 'asset tag',
            'sku': 'sku number',
        })
        if found['type'] not in CHASSIS_TYPES:
            found['type'] = ''
        return clean(found)

    async def _chassis_sysfs(self, record: dict) -> dict:
        found = self.sysfs_values({
            'manufacturer': 'chassis_vendor',
            'type': 'chassis_type',
            'version': 'chassis_version',
            'serial': 'chassis_serial',
            'asset_tag': 'chassis_asset_tag',
        })
        found['type'] = decode_chassis_type(found['type'])
        return clean(found)
