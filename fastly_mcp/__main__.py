from fastly_mcp.server import main

main()
