import json
import logging
import os

import yaml

"""
Optional connection defaults for DAVClient, read from a JSON or YAML
file.  A config file holds named sections; a section may inherit
from another one:

    {
      "default": {"tinydav_timeout": 30},
      "slow-server": {"inherits": "default", "tinydav_timeout": 300}
    }

Keys prepended with ``tinydav_`` are connection parameters, see
``tinydav.davclient.get_davclient``.
"""

log = logging.getLogger(__name__)


def config_section(config, section="default"):
    if section in config and "inherits" in config[section]:
        ret = config_section(config, config[section]["inherits"])
    else:
        ret = {}
    if section in config:
        ret.update(config[section])
    return ret


def read_config(fn):
    """
    Read a config file, JSON first and YAML if that fails.  Without a
    file name the default locations are tried.  Returns {} (or None
    when no default location holds a file) if nothing usable is found;
    a broken file is logged and ignored.
    """
    if not fn:
        cfgdir = f"{os.environ.get('HOME', '/')}/.config/"
        for config_file in (
            f"{cfgdir}/tinydav/tinydav.conf",
            f"{cfgdir}/tinydav/tinydav.yaml",
            f"{cfgdir}/tinydav/tinydav.json",
            "/etc/tinydav/tinydav.conf",
        ):
            cfg = read_config(config_file)
            if cfg:
                return cfg
        return None

    try:
        with open(fn, "rb") as config_file:
            raw = config_file.read()
    except FileNotFoundError:
        log.info("no config file found at %s", fn)
        return {}

    try:
        return json.loads(raw)
    except ValueError:
        pass
    try:
        cfg = yaml.safe_load(raw)
    except yaml.YAMLError:
        log.error(
            f"config file {fn} exists but is neither valid json nor yaml.  Check the syntax."
        )
        return {}
    if not isinstance(cfg, dict):
        log.error(f"config file {fn} does not contain any sections.  It will be ignored")
        return {}
    return cfg
