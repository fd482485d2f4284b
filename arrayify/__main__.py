from arrayify.cli import main

raise SystemExit(main())
