"""CLI entry point for docrag."""

import argparse
import logging
import sys
from typing import Literal, cast

from docrag.clients import OllamaClient
from docrag.config import Settings
from docrag.errors import DocragError
from docrag.service import RetrievalService

logger = logging.getLogger(__name__)


def ingest(service: RetrievalService, force: bool = False) -> None:
    """Build the index, or skip if the embedding history is still fresh.

    Args:
        service: Retrieval service to initialize
        force: Clear the store and rebuild regardless of history
    """
    stats = service.refresh() if force else service.initialize()
    logger.info(f"Indexed {stats.total_documents} chunks from {len(stats.file_stats)} files")


def search(service: RetrievalService, query: str, limit: int) -> None:
    results = service.search(query, limit)
    if not results:
        print(f"No results found for: {query}")
        return

    for i, r in enumerate(results, 1):
        location = f"{r.filename} > {r.heading}" if r.heading else r.filename
        print(f"{i}. [{r.similarity:.3f}] {location}")
        print(f"   {r.content[:200].replace(chr(10), ' ')}")
        print()


def ask(service: RetrievalService, query: str, model: str | None, stream: bool) -> None:
    """Answer a question with retrieved context and print the reply."""
    if stream:
        for fragment in service.answer_stream(query, model):
            print(fragment, end="", flush=True)
        print()
        return

    answer = service.answer(query, model)
    print(answer.content)
    if answer.relevant_docs:
        print()
        print("Sources:")
        for doc in answer.relevant_docs:
            suffix = f" ({doc['heading']})" if doc["heading"] else ""
            print(f"  {doc['filename']}{suffix} [{doc['similarity']:.3f}]")


def stats(service: RetrievalService) -> None:
    current = service.get_stats()
    marker = service.history.load()

    print("Index Statistics")
    print("=" * 50)
    print(f"  Documents folder: {service.source_dir}")
    print(f"  Total chunks: {current.total_documents}")
    for filename, count in sorted(current.file_stats.items()):
        print(f"    {filename}: {count}")
    if marker:
        print(f"  Last initialized: {marker.last_initialized.strftime('%Y-%m-%d %H:%M:%S %Z')}")
    else:
        print("  Last initialized: Never")
    print("=" * 50)


def serve(service: RetrievalService, transport: str = "stdio") -> None:
    """Warm up the index and start the MCP server.

    Args:
        service: Retrieval service backing the tools
        transport: Transport protocol (stdio or sse)
    """
    # Import here to avoid loading MCP unless needed
    from docrag.server import create_mcp_server

    service.warm_up()
    logger.info(f"Serving {service.source_dir} via {transport}")
    mcp = create_mcp_server(service)
    mcp.run(transport=cast(Literal["stdio", "sse", "streamable-http"], transport))


def models(settings: Settings) -> None:
    with OllamaClient(settings.ollama_url, timeout=settings.request_timeout) as client:
        for name in client.list_models():
            print(name)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docrag",
        description="docrag - retrieval-augmented generation over a markdown folder",
    )
    parser.add_argument(
        "--docs",
        help="Documents folder (default: DOCRAG_DOCS_DIR or ./docs)",
    )
    parser.add_argument(
        "--data",
        help="Folder for the vector store and history (default: DOCRAG_DATA_DIR or ./data)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ingest command
    ingest_parser = subparsers.add_parser(
        "ingest",
        help="Embed the documents folder into the vector store",
    )
    ingest_parser.add_argument(
        "--force",
        action="store_true",
        help="Rebuild even if the index was built recently",
    )

    # search command
    search_parser = subparsers.add_parser("search", help="Semantic search over the index")
    search_parser.add_argument("query", help="Natural language query")
    search_parser.add_argument(
        "-k",
        "--top-k",
        type=int,
        default=None,
        help="Number of results (default: DOCRAG_TOP_K or 5)",
    )

    # ask command
    ask_parser = subparsers.add_parser("ask", help="Answer a question using the documents")
    ask_parser.add_argument("query", help="Question to answer")
    ask_parser.add_argument("--model", default=None, help="Ollama chat model")
    ask_parser.add_argument("--stream", action="store_true", help="Print the reply as it streams")

    subparsers.add_parser("stats", help="Show index statistics")

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Start the MCP server")
    serve_parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default="stdio",
        help="Transport protocol (default: stdio)",
    )

    subparsers.add_parser("models", help="List models installed on the Ollama server")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.docs:
        overrides["docs_dir"] = args.docs
    if args.data:
        overrides["data_dir"] = args.data
    settings = Settings(**overrides)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(message)s",
    )

    try:
        if args.command == "models":
            models(settings)
            return 0

        with RetrievalService.from_settings(settings) as service:
            if args.command == "ingest":
                ingest(service, force=args.force)
            elif args.command == "search":
                search(service, args.query, settings.top_k if args.top_k is None else args.top_k)
            elif args.command == "ask":
                ask(service, args.query, args.model, args.stream)
            elif args.command == "stats":
                stats(service)
            elif args.command == "serve":
                serve(service, args.transport)
    except KeyboardInterrupt:
        return 130
    except DocragError as e:
        logger.error(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
