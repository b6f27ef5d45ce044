# server.py
from __future__ import annotations

import logging
import sys

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import JSONResponse

from aggregate import get_dynamic_data
from aggregate import get_static_data
from collectors.factory import get_collector
from errors import UnsupportedOperation
from helper.logs import init_logging
from os_env import APP_NAME
from os_env import APP_VERSION
from os_env import SERVER_HOST
from os_env import SERVER_PORT
from site_check import check_site

logger = logging.getLogger(__name__)

app = FastMCP(name=APP_NAME)

# one collector per process, host identity detected once
collector = get_collector()


def unsupported(e: UnsupportedOperation) -> JSONResponse:
    return JSONResponse({'error': e.code, 'hint': e.hint}, status_code=501)


# ------------------------------------------------------
# HTTP API
# ------------------------------------------------------

@app.custom_route('/api/getServices', methods=['GET'])
async def api_get_services(request: Request) -> JSONResponse:
    """
    Service status for `?name=` (single name, comma/space separated list or '*').
    A missing name selects nothing and returns [].
    """
    services = await collector.services(request.query_params.get('name', ''))
    return JSONResponse([s.to_json() for s in services])


@app.custom_route('/api/checkSite', methods=['GET'])
async def api_check_site(request: Request) -> JSONResponse:
    """Reachability and latency of `?url=`."""
    result = await check_site(request.query_params.get('url', ''))
    return JSONResponse(result.to_json())


@app.custom_route('/api/system', methods=['GET'])
async def api_system(request: Request) -> JSONResponse:
    return JSONResponse((await collector.system()).to_json())


@app.custom_route('/api/bios', methods=['GET'])
async def api_bios(request: Request) -> JSONResponse:
    return JSONResponse((await collector.bios()).to_json())


@app.custom_route('/api/baseboard', methods=['GET'])
async def api_baseboard(request: Request) -> JSONResponse:
    return JSONResponse((await collector.baseboard()).to_json())


@app.custom_route('/api/chassis', methods=['GET'])
async def api_chassis(request: Request) -> JSONResponse:
    return JSONResponse((await collector.chassis()).to_json())


@app.custom_route('/api/osInfo', methods=['GET'])
async def api_os_info(request: Request) -> JSONResponse:
    return JSONResponse((await collector.os_info()).to_json())


@app.custom_route('/api/uuid', methods=['GET'])
async def api_uuid(request: Request) -> JSONResponse:
    return JSONResponse((await collector.uuid()).to_json())


@app.custom_route('/api/versions', methods=['GET'])
async def api_versions(request: Request) -> JSONResponse:
    """Tool versions for `?apps=` ('*' when omitted). Unknown names are left out."""
    report = await collector.versions(request.query_params.get('apps', '*'))
    return JSONResponse(report.to_json())


@app.custom_route('/api/shell', methods=['GET'])
async def api_shell(request: Request) -> JSONResponse:
    try:
        return JSONResponse({'shell': await collector.shell()})
    except UnsupportedOperation as e:
        return unsupported(e)


@app.custom_route('/api/time', methods=['GET'])
async def api_time(request: Request) -> JSONResponse:
    return JSONResponse(collector.time().to_json())


@app.custom_route('/api/getStaticData', methods=['GET'])
async def api_static_data(request: Request) -> JSONResponse:
    return JSONResponse((await get_static_data(collector)).to_json())


@app.custom_route('/api/getDynamicData', methods=['GET'])
async def api_dynamic_data(request: Request) -> JSONResponse:
    data = await get_dynamic_data(collector, request.query_params.get('srv', '*'))
    return JSONResponse(data.to_json())


# ------------------------------------------------------
# RESOURCES
# ------------------------------------------------------

@app.resource('data://config')
def get_config():
    """
    Health check resource.
    Returns the service name, version and the platform it inventories.
    """
    return {
        'service': APP_NAME,
        'version': APP_VERSION,
        'platform': collector.host.platform.value,
        'status': 'running',
    }


# ------------------------------------------------------
# TOOLS (ACTIONS)
# ------------------------------------------------------

@app.tool()
def get_testing_ping():
    """Liveness check for MCP clients: always answers 'pong'."""
    return 'pong'


@app.tool()
async def get_services(name: str = '*'):
    """
    Tool to fetch the status of system services.

    Args:
        name (str): One service, a comma separated list, or '*' for all of them.

    Returns:
        dict: Services with running state, start mode, pids and CPU / memory usage.
    """
    services = await collector.services(name)
    return {'services': [s.to_json() for s in services]}


@app.tool()
async def check_website(url: str):
    """
    Checks whether a website answers and how fast.

    Args:
        url (str): Full http(s) URL.
    """
    return (await check_site(url)).to_json()


@app.tool()
async def get_hardware():
    """
    Hardware identity of this host: system, BIOS, baseboard and chassis.
    Fields that could not be read keep their defaults ('' or '-').
    """
    return {
        'system': (await collector.system()).to_json(),
        'bios': (await collector.bios()).to_json(),
        'baseboard': (await collector.baseboard()).to_json(),
        'chassis': (await collector.chassis()).to_json(),
    }


@app.tool()
async def get_os_info():
    """Operating system details plus the machine UUID."""
    return {
        'os': (await collector.os_info()).to_json(),
        'uuid': (await collector.uuid()).to_json(),
    }


@app.tool()
async def get_versions(apps: str = '*'):
    """
    Installed tool versions.

    Args:
        apps (str): Comma separated tool names (e.g. "git, node, openssl") or '*'.
    """
    return (await collector.versions(apps)).to_json()


@app.tool()
async def get_shell():
    """The user's login shell. Not available on Windows."""
    try:
        return {'shell': await collector.shell()}
    except UnsupportedOperation as e:
        return {'error': e.code, 'hint': e.hint}


@app.tool()
async def get_static_inventory():
    """
    Master Inventory Tool.
    Collects system, BIOS, baseboard, chassis, OS, UUID and versions in one sweep.
    """
    return (await get_static_data(collector)).to_json()


@app.tool()
async def get_dynamic_inventory(services: str = '*'):
    """
    Current time, CPU load, memory usage and service status.

    Args:
        services (str): Service selector, same syntax as get_services.
    """
    return (await get_dynamic_data(collector, services)).to_json()


if __name__ == '__main__':
    init_logging()
    print(f"[INFO] {APP_NAME} running on {SERVER_HOST}:{SERVER_PORT}", file=sys.stderr)
    try:
        app.run(transport='streamable-http', host=SERVER_HOST, port=SERVER_PORT)
    except KeyboardInterrupt:
        print('\n[INFO] Server stopping...', file=sys.stderr)
    except Exception as e:
        print(f"\n[ERROR] Server crashed: {e}", file=sys.stderr)
