from n9e_mcp_server import main

raise SystemExit(main())
