import os
import sys

# Add src to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from src.prediction.presentation.cli import main

if __name__ == "__main__":
    # Meant to be scheduled once a day, e.g. cron "0 2 * * *"
    sys.exit(main(["daily", *sys.argv[1:]]))
