import argparse
import logging
import sys

from .config import Settings, configure_logging
from .contract import VotingContract

logger = logging.getLogger(__name__)


def show_status(client: VotingContract, candidate_id: int) -> int:
    try:
        snap = client.snapshot(candidate_id)
    except Exception as e:
        logger.error(f"Error fetching data: {e}")
        print("Could not load election data.")
        return 1
    candidate = snap["candidate"]
    print(f"Election Ended: {'Yes' if snap['electionEnded'] else 'No'}")
    print("Candidate Details")
    print(f"  ID: {candidate['id']}")
    print(f"  Name: {candidate['name']}")
    print(f"  Votes: {candidate['voteCount']}")
    return 0


def cast(client: VotingContract, candidate_id: int) -> int:
    try:
        client.cast_vote(candidate_id)
    except Exception as e:
        logger.error(f"Error casting vote: {e}")
        print("Failed to cast vote.")
        return 1
    print("Vote cast successfully!")
    return 0


def main(argv=None, client: VotingContract = None) -> int:
    parser = argparse.ArgumentParser(prog="votechain-vote", description="Read election state and cast votes")
    sub = parser.add_subparsers(dest="command", required=True)

    status_p = sub.add_parser("status", help="show whether the election ended and one candidate")
    status_p.add_argument("--candidate", type=int, default=1)

    cast_p = sub.add_parser("cast", help="cast a vote for a candidate id")
    cast_p.add_argument("candidate_id", type=int)

    args = parser.parse_args(argv)

    if client is None:
        settings = Settings.from_env()
        configure_logging(settings.log_level)
        client = VotingContract.from_settings(settings)

    if args.command == "status":
        return show_status(client, args.candidate)
    return cast(client, args.candidate_id)


if __name__ == "__main__":
    sys.exit(main())
