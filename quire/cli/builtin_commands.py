# Importing the modules registers their commands with BaseCommand.
from ..posts import site_cli
from ..web import serve_cli

# Keep this at the bottom so "version" is listed last
from . import version_cli

del site_cli
del serve_cli
del version_cli
