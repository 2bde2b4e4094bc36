from template_init.cli import main

raise SystemExit(main())
