from narrative_diagram.cli import main

raise SystemExit(main())
