from __future__ import annotations

import asyncio

from collectors.dmi import DMESG_HYPERVISOR
from collectors.dmi import DMI_DIR
from collectors.dmi import DMIDECODE
from collectors.linux import LinuxCollector
from collectors.mac import IOREG_PLATFORM
from collectors.mac import MacCollector
from collectors.windows import WindowsCollector
from collectors.windows import cim

DMI_SYSTEM = DMIDECODE.format(kind='system')

THINKPAD = """# dmidecode 3.3
Getting SMBIOS data from sysfs.
SMBIOS 3.0.0 present.

Handle 0x000F, DMI type 1, 27 bytes
System Information
	Manufacturer: LENOVO
	Product Name: 20L5CTO1WW
	Version: ThinkPad T480
	Serial Number: PF1ABCDE
	UUID: 4C4C4544-0042-3510-8052-B4C04F4E4B32
	Wake-up Type: Power Switch
	SKU Number: LENOVO_MT_20L5_BU_Think_FM_ThinkPad T480
	Family: ThinkPad T480
"""

IOREG = """+-o Root  <class IORegistryEntry, id 0x100000100, retain 12>
  +-o MacBookPro15,1  <class IOPlatformExpertDevice, id 0x100000110, registered, matched, active, busy 0 (1 ms), retain 42>
    {
      "IOPlatformSystemSleepPolicy" = <534c505402000a00>
      "compatible" = <"MacBookPro15,1">
      "version" = <"1.0">
      "board-id" = <"Mac-937A206F2EE63C01">
      "manufacturer" = <"Apple Inc.">
      "model" = <"MacBookPro15,1">
      "IOPlatformSerialNumber" = "C02XYZ123ABC"
      "IOPlatformUUID" = "D4A2B3C1-1234-5678-9ABC-DEF012345678"
    }
"""


def sysfs(**values):
    return {f"{DMI_DIR}/{name}": f"{value}\n" for name, value in values.items()}


def test_dmidecode_wins(linux_host, fake_runner):
    runner = fake_runner({DMI_SYSTEM: THINKPAD}, sysfs(sys_vendor='Other Vendor'))
    system = asyncio.run(LinuxCollector(linux_host, runner).system())

    assert system.manufacturer == 'LENOVO'
    assert system.model == '20L5CTO1WW'
    assert system.version == 'ThinkPad T480'
    assert system.serial == 'PF1ABCDE'
    assert system.uuid == '4c4c4544-0042-3510-8052-b4c04f4e4b32'
    assert system.sku == 'LENOVO_MT_20L5_BU_Think_FM_ThinkPad T480'
    assert system.virtual is False
    assert system.raspberry is None
    # identified hardware never reaches the dmesg probe
    assert DMESG_HYPERVISOR not in runner.calls


def test_sysfs_fallback_and_qemu_disk(linux_host, fake_runner):
    runner = fake_runner(
        files=sysfs(
            sys_vendor='QEMU',
            product_name='Standard PC (Q35 + ICH9, 2009)',
            product_version='pc-q35-6.2',
            product_uuid='AABBCCDD-0000-1111-2222-333344445555',
        ),
        dirs={'/dev/disk/by-id': ['scsi-0QEMU_QEMU_HARDDISK_drive-scsi0', 'dm-name-root']},
    )
    system = asyncio.run(LinuxCollector(linux_host, runner).system())

    assert system.manufacturer == 'QEMU'
    assert system.model == 'Standard PC (Q35 + ICH9, 2009)'
    assert system.uuid == 'aabbccdd-0000-1111-2222-333344445555'
    assert system.serial == '-'
    assert system.virtual is True


def test_placeholders_fall_through(linux_host, fake_runner):
    board = (
        'System Information\n'
        '\tManufacturer: To Be Filled By O.E.M.\n'
        '\tProduct Name: B450M Pro4\n'
        '\tSerial Number: To Be Filled By O.E.M.\n'
    )
    runner = fake_runner({DMI_SYSTEM: board}, sysfs(sys_vendor='ASRock'))
    system = asyncio.run(LinuxCollector(linux_host, runner).system())

    assert system.manufacturer == 'ASRock'
    assert system.model == 'B450M Pro4'
    assert system.serial == '-'


def test_hypervisor_signature(linux_host, fake_runner):
    board = 'System Information\n\tManufacturer: innotek GmbH\n\tProduct Name: VirtualBox\n'
    runner = fake_runner({DMI_SYSTEM: board})
    system = asyncio.run(LinuxCollector(linux_host, runner).system())
    assert system.virtual is True
    assert system.model == 'VirtualBox'


def test_container_marker_overrides_model(linux_host, fake_runner):
    runner = fake_runner({DMI_SYSTEM: THINKPAD}, {'/.dockerenv': ''})
    system = asyncio.run(LinuxCollector(linux_host, runner).system())
    assert system.model == 'Docker Container'
    assert system.virtual is True
    assert system.manufacturer == 'LENOVO'


def test_cgroup_container_markers(linux_host, fake_runner):
    for cgroup, model in [
        ('12:pids:/docker/3f2a9c\n', 'Docker Container'),
        ('0::/machine.slice/libpod-8e1b.scope\n', 'Podman Container'),
        ('11:memory:/kubepods/burstable/pod1/docker-ab12\n', 'Kubernetes Pod'),
        ('2:cpuset:/lxc/web01\n', 'LXC Container'),
    ]:
        runner = fake_runner({DMI_SYSTEM: THINKPAD}, {'/proc/1/cgroup': cgroup})
        system = asyncio.run(LinuxCollector(linux_host, runner).system())
        assert system.model == model
        assert system.virtual is True


def test_plain_cgroup_is_not_a_container(linux_host, fake_runner):
    runner = fake_runner({DMI_SYSTEM: THINKPAD}, {'/proc/1/cgroup': '0::/init.scope\n'})
    system = asyncio.run(LinuxCollector(linux_host, runner).system())
    assert system.model == '20L5CTO1WW'
    assert system.virtual is False


def test_dmesg_runs_after_virtual_disk(linux_host, fake_runner):
    runner = fake_runner(
        {DMESG_HYPERVISOR: '[    0.000000] Hypervisor detected: KVM\n'},
        dirs={'/dev/disk/by-id': ['scsi-0QEMU_QEMU_HARDDISK_drive-scsi0']},
    )
    system = asyncio.run(LinuxCollector(linux_host, runner).system())
    assert DMESG_HYPERVISOR in runner.calls
    assert system.model == 'Virtual machine'
    assert system.virtual is True


def test_dmesg_hypervisor(linux_host, fake_runner):
    runner = fake_runner({DMESG_HYPERVISOR: '[    0.000000] Hypervisor detected: KVM\n'})
    system = asyncio.run(LinuxCollector(linux_host, runner).system())
    assert system.model == 'Virtual machine'
    assert system.virtual is True


def test_raspberry_pi(linux_host, fake_runner):
    cpuinfo = (
        'Hardware\t: BCM2835\n'
        'Revision\t: a02082\n'
        'Serial\t\t: 00000000abcdef01\n'
        'Model\t\t: Raspberry Pi 3 Model B Rev 1.2\n'
    )
    runner = fake_runner(files={'/proc/cpuinfo': cpuinfo})
    system = asyncio.run(LinuxCollector(linux_host, runner).system())

    assert system.manufacturer == 'Raspberry Pi Foundation'
    assert system.model == 'Raspberry Pi 3 Model B Rev 1.2'
    assert system.version == 'a02082'
    assert system.serial == '00000000abcdef01'
    assert system.virtual is False
    assert system.to_json()['raspberry'] == {
        'manufacturer': 'Sony UK',
        'processor': 'BCM2837',
        'type': '3B',
        'revision': '1.2',
    }


def test_nothing_readable_gives_defaults(linux_host, fake_runner):
    system = asyncio.run(LinuxCollector(linux_host, fake_runner()).system())
    assert system.to_json() == {
        'manufacturer': '', 'model': 'Computer', 'version': '', 'serial': '-',
        'uuid': '-', 'sku': '-', 'virtual': False,
    }


def test_chain_order(linux_host, fake_runner):
    collector = LinuxCollector(linux_host, fake_runner())
    assert collector.system_chain().names() == ['dmidecode', 'sysfs']
    assert collector.heuristics_chain().names() == [
        'hypervisor-signature', 'disk-by-id', 'container', 'dmesg', 'raspberry',
    ]


def test_mac_ioreg(mac_host, fake_runner):
    runner = fake_runner({IOREG_PLATFORM: IOREG})
    system = asyncio.run(MacCollector(mac_host, runner).system())

    assert system.manufacturer == 'Apple Inc.'
    assert system.model == 'MacBookPro15,1'
    assert system.version == '1.0'
    assert system.serial == 'C02XYZ123ABC'
    assert system.uuid == 'd4a2b3c1-1234-5678-9abc-def012345678'
    assert system.sku == 'Mac-937A206F2EE63C01'
    assert system.virtual is False


def test_windows_vmware(windows_host, fake_runner):
    product = (
        '\r\n'
        'IdentifyingNumber : VMware-56 4d 2a 1b\r\n'
        'Name              : VMware Virtual Platform\r\n'
        'Vendor            : VMware, Inc.\r\n'
        'Version           : None\r\n'
        'UUID              : 564D2A1B-0000-1111-2222-333344445555\r\n'
    )
    runner = fake_runner({cim('Win32_ComputerSystemProduct'): product})
    system = asyncio.run(WindowsCollector(windows_host, runner).system())

    assert system.manufacturer == 'VMware, Inc.'
    assert system.model == 'VMware Virtual Platform'
    assert system.uuid == '564d2a1b-0000-1111-2222-333344445555'
    assert system.sku == '-'
    assert system.virtual is True
    # already virtual, the BIOS markers are not consulted
    assert cim('Win32_BIOS', 'Version, SerialNumber, SMBIOSBIOSVersion') not in runner.calls


def test_windows_bios_marker(windows_host, fake_runner):
    runner = fake_runner({
        cim('Win32_ComputerSystemProduct'): 'Vendor : Microsoft Corporation\r\nName : Surface\r\n',
        cim('MS_SystemInformation', 'SystemSKU', 'root\\wmi'): 'SystemSKU : Surface_Pro_7\r\n',
        cim('Win32_BIOS', 'Version, SerialNumber, SMBIOSBIOSVersion'): 'Version : VRTUAL - 1\r\n',
    })
    system = asyncio.run(WindowsCollector(windows_host, runner).system())
    assert system.sku == 'Surface_Pro_7'
    assert system.virtual is True
