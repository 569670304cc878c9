from .unified_cli import main

raise SystemExit(main())
