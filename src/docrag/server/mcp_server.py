"""FastMCP server exposing retrieval over one document folder."""

from mcp.server.fastmcp import FastMCP

from docrag.errors import DocragError
from docrag.models import ScoredChunk, StoreStats
from docrag.service import RetrievalService


def format_results(query: str, results: list[ScoredChunk]) -> str:
    """Render search results as a ranked, truncated listing."""
    if not results:
        return f"No results found for: {query}"

    lines = []
    for i, r in enumerate(results, 1):
        # Truncate long text snippets
        text = r.content[:200].replace("\n", " ")
        if len(r.content) > 200:
            text += "..."

        location = f"{r.filename} > {r.heading}" if r.heading else r.filename
        lines.append(f"{i}. [{r.similarity:.3f}] {location}")
        lines.append(f"   {text}")
        lines.append("")

    return "\n".join(lines)


def format_stats(stats: StoreStats) -> str:
    lines = [f"Total chunks: {stats.total_documents}"]
    for filename, count in sorted(stats.file_stats.items()):
        lines.append(f"  {filename}: {count}")
    return "\n".join(lines)


def create_mcp_server(service: RetrievalService) -> FastMCP:
    """Create an MCP server over an already constructed service.

    Args:
        service: The retrieval service the tools delegate to

    Returns:
        Configured FastMCP server instance
    """
    mcp = FastMCP(
        name="docrag",
    )

    @mcp.tool()
    def search(query: str, limit: int = 5) -> str:
        """Semantic search across the indexed documents.

        Args:
            query: Natural language description of what you're looking for
            limit: Maximum number of results to return (default: 5)

        Returns:
            Ranked list of relevant chunks with similarity scores
        """
        try:
            results = service.search(query, limit)
        except DocragError as e:
            return f"Error: {e}"
        return format_results(query, results)

    @mcp.tool()
    def ask(question: str, model: str = "") -> str:
        """Answer a question with the chat model, grounded in the documents.

        Args:
            question: The question to answer
            model: Ollama model name; empty uses the configured default

        Returns:
            The model's answer followed by the sources it was given
        """
        try:
            answer = service.answer(question, model or None)
        except DocragError as e:
            return f"Error: {e}"

        sources = [
            f"- {d['filename']}" + (f" ({d['heading']})" if d["heading"] else "")
            for d in answer.relevant_docs
        ]
        if not sources:
            return answer.content
        return answer.content + "\n\nSources:\n" + "\n".join(sources)

    @mcp.tool()
    def stats() -> str:
        """Show how many chunks are indexed, per file."""
        return format_stats(service.get_stats())

    @mcp.tool()
    def refresh() -> str:
        """Re-read and re-embed every document, discarding the current index."""
        try:
            return format_stats(service.refresh())
        except DocragError as e:
            return f"Error: {e}"

    return mcp
