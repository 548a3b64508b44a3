import sys

from cobweb.main import main

sys.exit(main())
