#!/usr/bin/env python
"""Send one message to ERNIE Bot and print (or save) the reply.

Examples:
  python scripts/chat.py --message "Write a haiku about rain"
  python scripts/chat.py --model pro --message "Summarize RFC 2616" --out data/reply.json
  python scripts/chat.py --model custom --custom-model my-deploy --message "hi" --timeout 0

Reads ERNIEBOT_ACCESS_TOKEN (required), ERNIEBOT_TIMEOUT and ERNIEBOT_BASE_URL
from the environment or a local .env file; --token/--timeout override them.
"""
from __future__ import annotations
import argparse
import json
import logging
import os
from pathlib import Path

# Load a local .env if present (without depending on python-dotenv)
def _load_env_file(env_path: Path) -> None:
    if not env_path.exists():
        return
    for line in env_path.read_text(encoding='utf-8').splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        k, v = line.split('=', 1)
        k = k.strip(); v = v.strip().strip('"').strip("'")
        existing = os.environ.get(k)
        if existing is None or existing.strip() == '':
            os.environ[k] = v

_load_env_file(Path('.env'))

from erniebot_client import ApiHttpException, ChatCompletionRequest, ChatMessage, ErnieBotService

logging.basicConfig(level=logging.INFO, format='[%(levelname)s] %(message)s')
logger = logging.getLogger('chat')


def parse_args():
    p = argparse.ArgumentParser(description='Chat with ERNIE Bot')
    p.add_argument('--message', required=True)
    p.add_argument('--system', help='System prompt')
    p.add_argument('--model', default='default', choices=['default', 'instant', 'pro', 'custom'])
    p.add_argument('--custom-model', help='Deployed model endpoint name (with --model custom)')
    p.add_argument('--temperature', type=float)
    p.add_argument('--token', help='Access token (defaults to ERNIEBOT_ACCESS_TOKEN)')
    p.add_argument('--timeout', type=float, help='Read timeout seconds, 0 disables')
    p.add_argument('--out', help='Write the full JSON response here')
    p.add_argument('--verbose', action='store_true')
    return p.parse_args()


def build_service(args) -> ErnieBotService:
    return ErnieBotService.from_env(token=args.token, timeout=args.timeout)


def main():
    args = parse_args()
    if args.verbose:
        logging.getLogger('erniebot_client').setLevel(logging.DEBUG)
    if args.model == 'custom' and not args.custom_model:
        raise SystemExit('--custom-model required with --model custom')

    request = ChatCompletionRequest(
        messages=[ChatMessage.user(args.message)],
        system=args.system,
        temperature=args.temperature,
    )
    with build_service(args) as service:
        try:
            if args.model == 'instant':
                resp = service.create_chat_completion_instant(request)
            elif args.model == 'pro':
                resp = service.create_chat_completion_pro(request)
            elif args.model == 'custom':
                resp = service.create_custom_chat_completion(args.custom_model, request)
            else:
                resp = service.create_chat_completion(request)
        except ApiHttpException as e:
            raise SystemExit(f'[error] {e}')

    print(resp.result)
    if resp.usage is not None:
        logger.info('tokens: prompt=%s total=%s', resp.usage.prompt_tokens, resp.usage.total_tokens)
    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(resp.model_dump(exclude_none=True), ensure_ascii=False, indent=2), encoding='utf-8')
        if args.verbose:
            print(f'[done] Wrote {out_path}')

if __name__ == '__main__':
    main()
