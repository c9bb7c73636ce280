import asyncio
import json
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from persona_quill import blender
from persona_quill.config import Settings, configure_logging
from persona_quill.errors import MissingContent, PersonaNotFound, PersonaQuillError
from persona_quill.models import ContentKind, ContentType, SynthesisRequest, WeightedPersonaRef

load_dotenv()
app = typer.Typer(help="Learn writing styles and synthesize persona-aware prompts.")
console = Console()


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level")):
    settings = Settings.from_env()
    configure_logging("DEBUG" if verbose else settings.log_level)


@contextmanager
def _errors():
    try:
        yield
    except PersonaQuillError as exc:
        console.print(f"[bold red]Error:[/] {exc}")
        raise typer.Exit(1)


def _store():
    from persona_quill.store import make_store
    settings = Settings.from_env()
    return make_store(settings.persona_store, db_path=settings.db_path)


def _read(path: Path) -> str:
    if not path.exists():
        console.print(f"[bold red]Error:[/] {path} does not exist")
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8")


def parse_persona(value: str) -> WeightedPersonaRef:
    """Parse ``name`` or ``name:weight`` into a reference; weight defaults to 1."""
    name, sep, weight = value.rpartition(":")
    if not sep:
        return WeightedPersonaRef(name=value.strip())
    try:
        return WeightedPersonaRef(name=name.strip(), weight=float(weight))
    except ValueError:
        raise typer.BadParameter(f"weight in {value!r} is not a number")


def _write_or_print(text: str, output: Optional[Path], markdown: bool = False) -> None:
    if output:
        output.write_text(text, encoding="utf-8")
        console.print(f"[bold green]✓[/] Saved to [cyan]{output}[/]")
    elif markdown:
        console.print(Markdown(text))
    else:
        console.print(text, markup=False, highlight=False)


# ── Analysis & training ──────────────────────────────────────────────────────

@app.command()
def analyze(
    file: Path = typer.Argument(help="Text file to analyze"),
    as_json: bool = typer.Option(False, "--json", help="Print raw metrics as JSON"),
):
    """Print style metrics for a text file without storing a persona."""
    from persona_quill.analyzers.profile import ProfileBuilder
    from persona_quill.formatter import format_persona_report

    text = _read(file)
    with _errors():
        profile = ProfileBuilder().build(file.stem, text)
    if as_json:
        console.print_json(profile.metrics.model_dump_json())
    else:
        console.print(Markdown(format_persona_report(profile)))


@app.command()
def train(
    name: str = typer.Argument(help="Persona name (stored lower-cased)"),
    file: Path = typer.Argument(help="Training text file"),
    content_type: str = typer.Option("mixed", "--content-type", "-c", help="posts, blogs or mixed"),
    instructions: Optional[str] = typer.Option(None, "--instructions", "-i", help="Special instructions"),
):
    """Train a persona from a text file and store it."""
    from persona_quill.analyzers.profile import ProfileBuilder

    if content_type not in ("posts", "blogs", "mixed"):
        console.print(f"[bold red]Error:[/] --content-type must be posts, blogs or mixed, got '{content_type}'")
        raise typer.Exit(1)
    text = _read(file)
    with _errors():
        if not text.strip():
            raise MissingContent(f"{file} is empty")
        with console.status(f"[bold green]Analyzing {file.name}..."):
            profile = ProfileBuilder().build(name, text, content_type)
            if instructions:
                profile = profile.model_copy(update={"special_instructions": instructions})
        asyncio.run(_store().save(profile))
    console.print(f"[bold green]✓[/] Trained [cyan]{profile.name}[/] from {profile.metrics.word_count} words")


@app.command()
def seed(
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", "-d", help="Directory with <name>-posts.txt files"),
    content_type: str = typer.Option("posts", "--content-type", "-c", help="posts or blogs"),
):
    """Load the built-in personas from their training files."""
    from persona_quill.store import seed_built_ins

    directory = data_dir or Settings.from_env().training_data_dir
    kind: ContentType = "blogs" if content_type == "blogs" else "posts"
    with _errors():
        seeded = asyncio.run(seed_built_ins(_store(), directory, kind))
    if not seeded:
        console.print(f"[yellow]No built-in training data found in {directory}[/]")
        return
    for profile in seeded:
        console.print(f"[bold green]✓[/] Seeded [cyan]{profile.name}[/] ({profile.metrics.word_count} words)")


# ── Store management ─────────────────────────────────────────────────────────

@app.command("list")
def list_personas():
    """List stored personas."""
    profiles = asyncio.run(_store().list())
    if not profiles:
        console.print("[dim]No personas stored yet.[/]")
        return
    table = Table("Name", "Kind", "Content", "Words", "Created")
    for p in profiles:
        table.add_row(p.name, p.kind, p.content_type, str(p.metrics.word_count), f"{p.created_at:%Y-%m-%d %H:%M}")
    console.print(table)


@app.command()
def show(
    name: str = typer.Argument(help="Persona name"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Save report to file instead of printing"),
):
    """Show a persona's style report."""
    from persona_quill.formatter import format_persona_report

    with _errors():
        profile = asyncio.run(_store().get(name))
        if profile is None:
            raise PersonaNotFound(f"persona {name!r} not found")
    _write_or_print(format_persona_report(profile), output, markdown=True)


@app.command()
def remove(name: str = typer.Argument(help="Persona name")):
    """Delete a stored persona."""
    with _errors():
        if not asyncio.run(_store().remove(name)):
            raise PersonaNotFound(f"persona {name!r} not found")
    console.print(f"[bold green]✓[/] Removed [cyan]{name.lower()}[/]")


@app.command()
def export(
    name: str = typer.Argument(help="Persona name"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Backup file to write"),
):
    """Export a persona as a JSON backup."""
    with _errors():
        record = asyncio.run(_store().export(name))
    _write_or_print(json.dumps(record, indent=2, ensure_ascii=False), output)


@app.command("import")
def import_(file: Path = typer.Argument(help="Backup JSON file")):
    """Restore a persona from a JSON backup."""
    text = _read(file)
    with _errors():
        profile = asyncio.run(_store().import_backup(text))
    console.print(f"[bold green]✓[/] Imported [cyan]{profile.name}[/]")


# ── Prompting & generation ───────────────────────────────────────────────────

def _build_request(
    platform: Optional[str],
    kind: str,
    title: str,
    body: Optional[str],
    body_file: Optional[Path],
    keywords: Optional[list[str]],
    personas: Optional[list[str]],
    source_link: Optional[str],
    include_source: bool,
    post_type: Optional[str],
    normalize: bool,
) -> SynthesisRequest:
    if kind not in ("post", "blog", "summary", "diagram", "comments"):
        console.print(f"[bold red]Error:[/] --kind must be post, blog, summary, diagram or comments, got '{kind}'")
        raise typer.Exit(1)
    text = _read(body_file) if body_file else (body or "")
    refs = [parse_persona(p) for p in personas or []]
    blender.validate(refs, blend=False)
    if normalize:
        refs = blender.normalize(refs)
    resolved = asyncio.run(blender.resolve(refs, _store())) if refs else []
    content_kind: ContentKind = kind
    return SynthesisRequest(
        platform=platform,
        kind=content_kind,
        title=title,
        body=text,
        keywords=keywords or [],
        source_link=source_link,
        include_source_link=include_source,
        personas=resolved,
        post_type=post_type,
    )


_PLATFORM = typer.Option(None, "--platform", "-p", help="linkedin, twitter, discord, medium, ...")
_KIND = typer.Option("post", "--kind", help="post, blog, summary, diagram or comments")
_TITLE = typer.Option("", "--title", "-t", help="Article title")
_BODY = typer.Option(None, "--body", "-b", help="Article body text")
_BODY_FILE = typer.Option(None, "--body-file", "-f", help="Read the article body from a file")
_KEYWORDS = typer.Option(None, "--keyword", "-k", help="Keyword to include (repeatable)")
_PERSONAS = typer.Option(None, "--persona", help="name or name:weight (repeatable)")
_SOURCE = typer.Option(None, "--source-link", help="Source URL of the article")
_INCLUDE_SOURCE = typer.Option(False, "--include-source", help="Ask for the source link in the output")
_POST_TYPE = typer.Option(None, "--post-type", help="devrel, technical, tutorial, opinion, news or story")
_NORMALIZE = typer.Option(False, "--normalize", help="Rescale persona weights to sum to 1")


@app.command()
def prompt(
    platform: Optional[str] = _PLATFORM,
    kind: str = _KIND,
    title: str = _TITLE,
    body: Optional[str] = _BODY,
    body_file: Optional[Path] = _BODY_FILE,
    keywords: Optional[list[str]] = _KEYWORDS,
    personas: Optional[list[str]] = _PERSONAS,
    source_link: Optional[str] = _SOURCE,
    include_source: bool = _INCLUDE_SOURCE,
    post_type: Optional[str] = _POST_TYPE,
    normalize: bool = _NORMALIZE,
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Save prompt to file instead of printing"),
):
    """Render the generation prompt without calling the LLM."""
    from persona_quill.prompts.synthesizer import synthesize

    with _errors():
        request = _build_request(platform, kind, title, body, body_file, keywords, personas,
                                 source_link, include_source, post_type, normalize)
        text = synthesize(request)
    _write_or_print(text, output)


@app.command()
def generate(
    platform: Optional[str] = _PLATFORM,
    kind: str = _KIND,
    title: str = _TITLE,
    body: Optional[str] = _BODY,
    body_file: Optional[Path] = _BODY_FILE,
    keywords: Optional[list[str]] = _KEYWORDS,
    personas: Optional[list[str]] = _PERSONAS,
    source_link: Optional[str] = _SOURCE,
    include_source: bool = _INCLUDE_SOURCE,
    post_type: Optional[str] = _POST_TYPE,
    normalize: bool = _NORMALIZE,
    provider: Optional[str] = typer.Option(None, "--provider", help="openai or groq"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model name override"),
    debug: bool = typer.Option(False, "--debug", help="Print the prompt sent to the LLM"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Save content to file instead of printing"),
):
    """Render the prompt and generate content with the configured LLM provider."""
    from persona_quill.generation import generate_text
    from persona_quill.prompts.synthesizer import synthesize, temperature_for

    settings = Settings.from_env()
    with _errors():
        request = _build_request(platform, kind, title, body, body_file, keywords, personas,
                                 source_link, include_source, post_type, normalize)
        text = synthesize(request)
        if debug:
            console.rule("[bold yellow]LLM Input")
            console.print(text, markup=False, highlight=False)
            console.rule()
        provider = provider or settings.llm_provider
        with console.status(f"[bold green]Generating with {provider}..."):
            content = generate_text(
                text,
                provider=provider,
                model=model or settings.llm_model,
                temperature=temperature_for(kind),
                max_retries=settings.llm_max_retries,
            )
    _write_or_print(content, output, markdown=kind in ("blog", "summary"))


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("persona_quill.api.server:app", host=host, port=port, reload=reload)
