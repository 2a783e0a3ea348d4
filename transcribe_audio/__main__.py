"""Package entry point for ``python -m transcribe_audio``.

WHY: Users run the synthesizer as ``python -m transcribe_audio tokens.json``
for CLI mode, or ``python -m transcribe_audio --serve`` to start the HTTP API.

HOW: Checks sys.argv for the ``--serve`` flag. If present, launches the
FastAPI app under uvicorn. Otherwise, delegates to the CLI's main() function.
"""

import sys

if __name__ == "__main__":
    if "--serve" in sys.argv:
        from transcribe_audio.server.app import run_api
        run_api()
    else:
        from transcribe_audio.cli import main
        main()
