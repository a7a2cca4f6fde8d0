import argparse
import asyncio
import logging
import sys

import aiofiles

from .config.config import GeminiProps
from .config.models import DEFAULT_VOICE_NAME
from .core.session import ChatSession
from .telemetry import setup_observable_logging
from .utils.errors import GeminiError, get_error_message

DEFAULT_SYSTEM_INSTRUCTION = "You are a helpful assistant."


def setup_logging(debug: bool = False) -> None:
    """设置日志配置"""
    level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def parse_args(argv=None):
    """解析命令行参数"""
    parser = argparse.ArgumentParser(
        description="Gemini Chat Core - one chat turn against the Gemini API",
    )

    parser.add_argument("prompt", help="User prompt for this turn")

    parser.add_argument(
        "--system",
        default=DEFAULT_SYSTEM_INSTRUCTION,
        help="System instruction sent with the request",
    )

    parser.add_argument(
        "--model",
        default=None,
        help="Gemini model to use (default: GEMINI_MODEL or gemini-2.5-flash)",
    )

    parser.add_argument(
        "--history",
        action="store_true",
        help="Keep the turn in the session history",
    )

    parser.add_argument(
        "--speak-to",
        default=None,
        metavar="PATH",
        help="Synthesize the answer and write the raw audio to PATH",
    )

    parser.add_argument(
        "--voice",
        default=DEFAULT_VOICE_NAME,
        help=f"Prebuilt voice for --speak-to (default: {DEFAULT_VOICE_NAME})",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode",
    )

    return parser.parse_args(argv)


def build_props(args) -> GeminiProps:
    overrides = {"enable_history": args.history, "debug": args.debug}
    if args.model:
        overrides["model"] = args.model
    return GeminiProps(**overrides)


async def run(args) -> int:
    props = build_props(args)
    chunks: list[str] = []

    def print_text(text: str) -> None:
        chunks.append(text)
        print(text, flush=True)

    async with ChatSession(props) as session:
        result = await session.chat(args.prompt, args.system, callback=print_text)
        if not result.ok:
            reason = get_error_message(result.error or result.status.value)
            logging.error(f"Chat failed: {reason}")
            return 1

        if args.speak_to and chunks:
            try:
                audio = await session.synthesize_speech(
                    "\n".join(chunks), args.voice
                )
            except GeminiError as e:
                logging.error(f"Speech synthesis failed: {e}")
                return 1
            async with aiofiles.open(args.speak_to, "wb") as f:
                await f.write(audio)
            logging.info(f"Wrote {len(audio)} bytes of audio to {args.speak_to}")

    return 0


def main(argv=None):
    """主函数"""
    args = parse_args(argv)

    # 设置日志
    setup_logging(args.debug)
    if args.debug:
        setup_observable_logging()

    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
