from glob import glob
from os.path import isabs, join
from typing import List

import orjson

from orcid_login.settings import CONFIG_DIR


def get_abs_path(rel_filepath: str) -> str:
    return rel_filepath if isabs(rel_filepath) else join(CONFIG_DIR, rel_filepath)


def read_orjson(rel_filepath: str) -> dict:
    with open(get_abs_path(rel_filepath), encoding="utf-8") as of:
        return orjson.loads(of.read())


def json_files(folder: str) -> List[str]:
    return sorted(glob(join(get_abs_path(folder), "*.json")))
