from pathrta.cli import main

raise SystemExit(main())
