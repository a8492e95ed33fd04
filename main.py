import os
import sys

from galaxy_orrery.app import main

if __name__ == "__main__":
    # Textures are looked up relative to the launcher, also in a frozen build.
    if getattr(sys, 'frozen', False):
        os.chdir(os.path.dirname(sys.executable))
    else:
        os.chdir(os.path.dirname(os.path.abspath(__file__)))
    sys.exit(main())
