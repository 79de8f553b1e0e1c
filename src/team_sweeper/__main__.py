"""Team status sweeper 主入口"""

from team_sweeper.run import main


if __name__ == "__main__":
    main()
