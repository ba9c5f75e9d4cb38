from slidereel.cli import main

raise SystemExit(main())
