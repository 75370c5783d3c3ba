"""
MCPify Installer CLI - Command-line interface for installing MCPify.

Commands:
- install: Download, verify and install the MCPify binary
"""
