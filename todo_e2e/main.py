# main.py
import logging
import os
import sys

from fastapi import FastAPI
import uvicorn

from todo_e2e.config.settings import Config
from todo_e2e.routes.api import router as api_router
from todo_e2e.services.suite_service import SuiteService


def setup_logging():
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
        stream=sys.stdout,
    )


def run_cli(scenario_names=None) -> int:
    service = SuiteService(Config)
    try:
        report = service.run_and_report(scenario_names)
    except KeyboardInterrupt:
        logging.warning('Suite interrupted by user.')
        return 130
    except ValueError as e:
        logging.error(str(e))
        return 2
    return report.exit_code


def create_app() -> FastAPI:
    app = FastAPI()
    from fastapi.middleware.cors import CORSMiddleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(api_router)
    return app


def run_api():
    uvicorn.run(create_app(), host="0.0.0.0", port=int(os.getenv("PORT", 8000)))


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    setup_logging()
    mode = os.getenv('MODE', 'cli').lower()
    if argv and argv[0] in ('cli', 'api'):
        mode, argv = argv[0], argv[1:]
    if mode == 'api':
        run_api()
        return 0
    return run_cli(argv or None)


if __name__ == '__main__':
    sys.exit(main())

# Usage:
#   python -m todo_e2e.main                      # run every scenario
#   python -m todo_e2e.main cli logout create_todo
#   python -m todo_e2e.main api                  # API server mode
#   MODE=api python -m todo_e2e.main             # API server mode via env
