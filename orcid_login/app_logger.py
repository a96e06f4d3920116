import os
from logging import getLogger, Filter, DEBUG, INFO
from logging.config import dictConfig

import yaml
from yaml import SafeLoader

from orcid_login.settings import LOG_BASE_DIR, LOGGER_CONFIG_FILE_PATH

root_logger = getLogger()
root_logger.setLevel(DEBUG)


class InfoFilter(Filter):
    def filter(self, rec):
        return rec.levelno == INFO


logger_levels = {}


def rec_set_logger(log_config, module_name=None) -> dict:
    """
    flattens the nested logger config. children are listed under "_sub"
    e.g. {"orcid_login": {"level": "INFO", "_sub": {"services": "DEBUG"}}}
    """
    result = {}
    if type(log_config) == str:
        result[module_name] = {"level": log_config}
    else:
        if module_name:
            result[module_name] = {k: v for k, v in log_config.items() if k != "_sub"}
        for module, level_and_children in log_config.get("_sub", {}).items():
            full_module_name = module_name + "." + module if module_name else module
            rec_results = rec_set_logger(level_and_children, full_module_name)
            result = {**result, **rec_results}
    return result


def init(config_file_path: str = LOGGER_CONFIG_FILE_PATH):
    global logger_levels

    if not os.path.isdir(LOG_BASE_DIR):
        os.makedirs(LOG_BASE_DIR)

    if not os.path.isfile(config_file_path):
        root_logger.warning(f"Could not find loglevel config: {config_file_path}")
        return

    with open(config_file_path) as fin:
        orig_log_config = yaml.load(fin, SafeLoader)
    root_logger.debug(f"logger config {orig_log_config}")

    log_config = {**orig_log_config, "loggers": {}}
    for path in orig_log_config.get("loggers", {}):
        log_config["loggers"].update(
            rec_set_logger(orig_log_config["loggers"][path], path)
        )

    try:
        dictConfig(log_config)
        logger_levels = log_config["loggers"]
        if days_info_handler := list(
            filter(lambda h: h.name == "days_handler", getLogger("orcid_login").handlers)
        ):
            days_info_handler[0].addFilter(InfoFilter())

    except ValueError as err:
        root_logger.exception(err)
        root_logger.error("Cannot configure logger")


def get_logger(name):
    if not logger_levels:
        init()
    logger = getLogger(name)
    if name not in logger_levels:
        dirs = name.split(".")
        for i in range(1, len(dirs)):
            parent = ".".join(dirs[:-i])
            # inherits the level of the configured parent
            if parent in logger_levels:
                return logger
        root_logger.warning(f"logger {name} level not found. Setting level to DEBUG")
        logger.setLevel(DEBUG)
    return logger
