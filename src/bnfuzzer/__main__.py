from bnfuzzer.cli import main

raise SystemExit(main())
