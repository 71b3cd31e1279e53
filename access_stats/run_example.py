from .analyzer import LogAnalyzer
from .reader import DEFAULT_LOGFILE
import json


def main():
    analyzer = LogAnalyzer(str(DEFAULT_LOGFILE))
    summary = analyzer.analyze()
    print(json.dumps(summary.to_dict(), indent=2))


if __name__ == "__main__":
    main()
