from junitwatch.cli import main

raise SystemExit(main())
