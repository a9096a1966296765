from typewriter.cli import main

raise SystemExit(main())
