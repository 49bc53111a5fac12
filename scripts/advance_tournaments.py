"""
Move tournaments through their lifecycle and distribute rank prizes.

Meant to run periodically (cron / scheduled Lambda).
"""

import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from bingoo.database.session import get_db_context
from bingoo.services.tournament_service import TournamentService


def main():
    with get_db_context() as db:
        result = TournamentService(db).advance_lifecycle()

    print(
        f"Tournaments started: {result.started}, completed: {result.completed}, "
        f"prizes distributed: {result.prizes_distributed}"
    )


if __name__ == "__main__":
    main()
