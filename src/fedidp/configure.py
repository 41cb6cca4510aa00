import copy
import json
from typing import Dict
from typing import List
from typing import Optional

from idpyoidc.configure import Base
from idpyoidc.configure import DEFAULT_DIR_ATTRIBUTE_NAMES

from fedidp.defaults import DEFAULT_ELEMENT_BUILDERS
from fedidp.defaults import DEFAULT_HASH_ALG

DEFAULT_LOADER_FILE_ATTRIBUTE_NAMES = ['idp_directory']

DEFAULT_LOADER_CONFIG = {
    "hash_alg": DEFAULT_HASH_ALG,
    "builders": DEFAULT_ELEMENT_BUILDERS
}


class LoaderConfiguration(Base):
    """Configuration of identity provider loading."""

    def __init__(self,
                 conf: Optional[Dict] = None,
                 base_path: str = '',
                 file_attributes: Optional[List[str]] = None,
                 domain: Optional[str] = "",
                 port: Optional[int] = 0,
                 dir_attributes: Optional[List[str]] = None,
                 ):
        if conf is None:
            conf = {}
        file_attributes = file_attributes or DEFAULT_LOADER_FILE_ATTRIBUTE_NAMES
        dir_attributes = dir_attributes or DEFAULT_DIR_ATTRIBUTE_NAMES

        Base.__init__(self, conf=conf, base_path=base_path, file_attributes=file_attributes,
                      dir_attributes=dir_attributes, domain=domain, port=port)

        self.hash_alg = conf.get("hash_alg", DEFAULT_LOADER_CONFIG["hash_alg"])

        _builders = copy.deepcopy(DEFAULT_LOADER_CONFIG["builders"])
        for key, spec in conf.get("builders", {}).items():
            if key not in _builders:
                raise ValueError(f"Unknown element builder: {key}")
            _builders[key] = {"class": spec["class"], "kwargs": spec.get("kwargs", {})}
        self.builders = _builders

        self.idp_directory = conf.get("idp_directory", "")

    @classmethod
    def from_file(cls, filename: str, base_path: Optional[str] = ''):
        with open(filename) as fp:
            _conf = json.loads(fp.read())
        return cls(_conf, base_path=base_path)
