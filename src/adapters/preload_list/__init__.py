from adapters.preload_list.loader import decode_preload_list, load_preload_list
from adapters.preload_list.models import PreloadListFile

__all__ = [
    "PreloadListFile",
    "decode_preload_list",
    "load_preload_list",
]
