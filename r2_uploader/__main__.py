from r2_uploader.cli import main

raise SystemExit(main())
