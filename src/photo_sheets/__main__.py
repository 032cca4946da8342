from photo_sheets.cli import main

raise SystemExit(main())
