import argparse
import json
import sys
from pathlib import Path

from sarabun_pdf.config import configure_logging, reload_config
from sarabun_pdf.models import Completed, Failed, GeneratePdfRequest, Unsupported
from sarabun_pdf.pipeline import GenerationExecutor


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a Sarabun document PDF from a request JSON."
    )
    parser.add_argument("request", help="请求JSON文件（camelCase 或 snake_case 字段）")
    parser.add_argument(
        "--out",
        default="",
        help="输出PDF路径（默认：与请求同名的 .pdf）",
    )
    parser.add_argument(
        "--config",
        default="config/sarabun_runtime.yaml",
        help="运行期配置（默认：config/sarabun_runtime.yaml）",
    )
    args = parser.parse_args()

    config = reload_config(args.config)
    configure_logging(config)

    request_path = Path(args.request)
    with open(request_path, encoding="utf-8") as f:
        request = GeneratePdfRequest.model_validate(json.load(f))

    outcome = GenerationExecutor(config=config).run(request)

    if isinstance(outcome, Unsupported):
        print(f"不支持: {outcome.reason}", file=sys.stderr)
        return 2
    if isinstance(outcome, Failed):
        print(f"失败: {outcome.message}", file=sys.stderr)
        return 1

    assert isinstance(outcome, Completed)
    out_path = Path(args.out) if args.out else request_path.with_suffix(".pdf")
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(outcome.pdf_bytes)
    print(f"{out_path}  {outcome.page_count}页  签名域: {', '.join(outcome.field_names) or '-'}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
