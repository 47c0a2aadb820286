import os
import sys

# Add project root to sys.path to allow imports from 'src'
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

def main():
    """
    Main entry point for the congestion forecasting application.
    """
    from src.prediction.presentation.cli import main as cli_main
    sys.exit(cli_main())

if __name__ == "__main__":
    main()
