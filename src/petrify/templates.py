"""String templates used by the module generator."""

TEMPLATE_HEADER = '''\
# Code generated by petrify {tool_ver}. DO NOT EDIT.
# sources:
{sources}
{doc}

from petrify.table import AssetTable, EmbeddedAsset

_bindata = (
'''

TEMPLATE_SOURCE_LINE = "# {name} ({size})"

TEMPLATE_ASSET_OPEN = """\
    EmbeddedAsset(
        name={name!r},
        compressed={compressed},
        size={size},
        mode={mode:#o},
        mod_time={mod_time},
        data=bytes(("""

TEMPLATE_ASSET_CLOSE = """
        )),
    ),
"""

TEMPLATE_FOOTER = '''\
)

assets = AssetTable(_bindata)

asset = assets.asset
must_asset = assets.must_asset
asset_info = assets.asset_info
asset_names = assets.asset_names
asset_dir = assets.asset_dir
filesystem = assets.filesystem

__all__ = [
    "assets",
    "asset",
    "must_asset",
    "asset_info",
    "asset_names",
    "asset_dir",
    "filesystem",
]
'''

DEFAULT_DOC = "Embedded assets. Import and call ``asset(name)`` or ``filesystem()``."
