from trello_mcp.server import run

run()
