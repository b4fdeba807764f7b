import sys

from marketintel.main import main

sys.exit(main())
