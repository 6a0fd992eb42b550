import sys

from claude_sounds.cli import main

sys.exit(main())
