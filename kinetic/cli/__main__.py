"""Allow running CLI as: python -m kinetic.cli"""

import sys

# Load .env from the working directory before anything else
from dotenv import load_dotenv

load_dotenv()

from .main import main

sys.exit(main())
