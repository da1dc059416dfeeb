"""
Run the market tools MCP server.
"""
import os

# Load environment
from dotenv import load_dotenv
load_dotenv(os.path.join(os.path.dirname(os.path.abspath(__file__)), ".env"))

from market_tools.main import run

if __name__ == "__main__":
    run()
