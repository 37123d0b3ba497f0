from sitekeys.adapters.textual.app import main

raise SystemExit(main())
