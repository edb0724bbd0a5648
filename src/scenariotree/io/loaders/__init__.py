from .config_loader import load_config
from .errors import LoaderError
from .tree_loader import find_tree_files, load_previous_artifact, read_text_file

__all__ = ["load_config", "find_tree_files", "load_previous_artifact", "read_text_file", "LoaderError"]
