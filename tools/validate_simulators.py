from __future__ import annotations
import sys
from prep_core.config import setup_logging
from prep_core.audit_simulators import main

if __name__ == "__main__":
    setup_logging()
    raise SystemExit(main(sys.argv[1:]))
