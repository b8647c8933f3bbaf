"""Remote installer MCP server: push files and run installers over WinRM."""
