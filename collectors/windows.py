# collectors/windows.py
from __future__ import annotations

import asyncio

import psutil

from collectors.base import BaseOSCollector
from collectors.release import logo_file
from collectors.services import WILDCARD
from collectors.services import parse_service_selector
from collectors.services import process_table
from errors import UnsupportedOperation
from helper.parsing import first_line
from helper.parsing import get_value
from helper.parsing import parse_release_date
from models.hardware import BaseboardInfo
from models.hardware import BiosInfo
from models.hardware import ChassisInfo
from models.hardware import SystemIdentity
from models.hardware import decode_chassis_type
from models.osinfo import OsInfo
from models.osinfo import UuidInfo
from models.services import ServiceInfo

VIRTUAL_BIOS_MARKERS = ('VRTUAL', 'A M I ', 'VirtualBox', 'VMWare', 'Xen')
VIRTUAL_MODELS = {'virtualbox', 'kvm', 'virtual machine', 'bochs'}

MACHINE_GUID = (
    '%windir%\\System32\\reg query '
    '"HKEY_LOCAL_MACHINE\\SOFTWARE\\Microsoft\\Cryptography" /v MachineGuid'
)
UEFI_LOG = 'findstr /C:"Detected boot environment" "%windir%\\Panther\\setupact.log"'


def cim(class_name: str, properties: str = '*', namespace: str | None = None) -> str:
    """PowerShell query printing one 'Name : Value' line per property."""
    scope = f" -Namespace {namespace}" if namespace else ''
    return (
        'powershell -NoProfile -NonInteractive -Command '
        f'"Get-CimInstance -ClassName {class_name}{scope} | Format-List {properties} | Out-String -Width 4096"'
    )


class WindowsCollector(BaseOSCollector):
    """
    Collector implementation for Windows systems.

    Mechanisms:
    - Hardware / OS: CIM classes queried through PowerShell (Win32_*).
    - Machine id: the MachineGuid registry value.
    - Services: psutil's Windows service API.
    """

    shell_probes = True

    async def query(self, class_name: str, properties: str = '*', namespace: str | None = None) -> list[str]:
        result = await self.runner.run(cim(class_name, properties, namespace))
        return [] if result.failed else result.lines()

    # ------------------------------
    # HARDWARE
    # ------------------------------
    async def system(self) -> SystemIdentity:
        lines = await self.query('Win32_ComputerSystemProduct')
        found = self.values(lines, {
            'manufacturer': 'vendor',
            'model': 'name',
            'version': 'version',
            'serial': 'identifyingnumber',
            'uuid': 'uuid',
        })
        found['uuid'] = found['uuid'].lower()

        model = found['model'].lower()
        manufacturer = found['manufacturer'].lower()
        found['virtual'] = (
            model in VIRTUAL_MODELS
            or model.startswith('vmware')
            or manufacturer.startswith('vmware')
            or manufacturer == 'xen'
        )

        sku = await self.query('MS_SystemInformation', 'SystemSKU', 'root\\wmi')
        found['sku'] = get_value(sku, 'systemsku')

        if not found['virtual']:
            result = await self.runner.run(cim('Win32_BIOS', 'Version, SerialNumber, SMBIOSBIOSVersion'))
            found['virtual'] = any(marker in result.stdout for marker in VIRTUAL_BIOS_MARKERS)

        return self.fill(SystemIdentity, found)

    async def bios(self) -> BiosInfo:
        lines = await self.query('Win32_BIOS')
        description = get_value(lines, 'description')

        if ' Version ' in description:
            # Phoenix ROM BIOS PLUS Version 1.10 A04
            vendor, version = description.split(' Version ', 1)
        elif ' Ver: ' in description:
            # BIOS Date: 06/27/16 17:50:16 Ver: 1.4.5
            vendor = get_value(lines, 'manufacturer')
            version = description.split(' Ver: ', 1)[1]
        else:
            vendor = get_value(lines, 'manufacturer')
            version = get_value(lines, 'version')

        found = self.values(lines, {'release_date': 'releasedate', 'revision': 'buildnumber'})
        found.update(
            vendor=vendor.strip(),
            version=version.strip(),
            release_date=parse_release_date(found['release_date']),
        )
        return self.fill(BiosInfo, found)

    async def baseboard(self) -> BaseboardInfo:
        lines = await self.query('Win32_BaseBoard')
        found = self.values(lines, {
            'manufacturer': 'manufacturer',
            'model': 'model',
            'version': 'version',
            'serial': 'serialnumber',
            'asset_tag': 'partnumber',
        })
        found['model'] = found['model'] or get_value(lines, 'product')
        found['asset_tag'] = found['asset_tag'] or get_value(lines, 'sku')
        return self.fill(BaseboardInfo, found)

    async def chassis(self) -> ChassisInfo:
        lines = await self.query('Win32_SystemEnclosure')
        found = self.values(lines, {
            'manufacturer': 'manufacturer',
            'model': 'model',
            'type': 'chassistypes',
            'version': 'version',
            'serial': 'serialnumber',
            'asset_tag': 'partnumber',
            'sku': 'sku',
        })
        # ChassisTypes : {9}
        found['type'] = decode_chassis_type(found['type'])
        return self.fill(ChassisInfo, found)

    # ------------------------------
    # OS
    # ------------------------------
    def fqdn(self) -> str:
        line = first_line(self.runner.run_sync('echo %COMPUTERNAME%.%USERDNSDOMAIN%').stdout).strip()
        return line or self.host.hostname

    def codepage(self) -> str:
        """'Active code page: 437' -> '437'"""
        line = first_line(self.runner.run_sync('chcp').stdout)
        return line.split(':')[-1].strip() if ':' in line else ''

    async def uefi(self) -> bool:
        result = await self.runner.run(UEFI_LOG)
        return not result.failed and 'uefi' in first_line(result.stdout).lower()

    async def os_info(self) -> OsInfo:
        lines = await self.query('Win32_OperatingSystem')
        found = self.values(lines, {
            'distro': 'caption',
            'serial': 'serialnumber',
            'build': 'buildnumber',
        })
        major = get_value(lines, 'servicepackmajorversion')
        minor = get_value(lines, 'servicepackminorversion')

        record = self.os_defaults()
        record.update({k: v for k, v in found.items() if v})
        record.update(
            platform='Windows',
            release=self.host.kernel or 'unknown',
            fqdn=self.fqdn(),
            codepage=self.codepage(),
            logofile=logo_file(found['distro'], self.host.platform),
            servicepack=f"{major}.{minor}" if major or minor else '',
            uefi=await self.uefi(),
        )
        return OsInfo(**record)

    async def uuid(self) -> UuidInfo:
        result = await self.runner.run(MACHINE_GUID)
        parts = result.stdout.split('REG_SZ')
        return UuidInfo(os=''.join(parts[1].split()).lower() if len(parts) > 1 else '')

    async def shell(self) -> str:
        raise UnsupportedOperation('shell', self.host.platform.value)

    # ------------------------------
    # SERVICES
    # ------------------------------
    async def services(self, names: str | None = '*') -> list[ServiceInfo]:
        selected = parse_service_selector(names)
        if not selected:
            return []
        return await asyncio.to_thread(windows_services, selected)


def windows_services(selected: list[str]) -> list[ServiceInfo]:
    """Blocking: walks the service control manager through psutil."""
    processes = {p['pid']: p for p in process_table()}

    if selected == [WILDCARD]:
        handles = list(psutil.win_service_iter())
    else:
        handles = []
        for name in selected:
            try:
                handles.append(psutil.win_service_get(name))
            except psutil.NoSuchProcess:
                continue

    found: dict[str, ServiceInfo] = {}
    for handle in handles:
        try:
            info = handle.as_dict()
        except (psutil.NoSuchProcess, psutil.AccessDenied, OSError):
            continue

        pid = info.get('pid')
        running = [processes[pid]] if pid and pid in processes and info.get('status') == 'running' else []
        found[info['name']] = ServiceInfo.from_processes(info['name'], running, info.get('start_type') or '')

    if selected == [WILDCARD]:
        return list(found.values())
    return [found.get(name) or ServiceInfo(name=name) for name in selected]
