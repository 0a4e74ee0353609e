"""Publish pipeline: enrich doclets, copy assets and write HTML pages."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Sequence
from urllib.parse import unquote

from .assets import copy_theme_static, copy_user_static
from .config import PublishOptions, TemplateConfig
from .enrich import (
    SourceFile,
    add_attribs,
    add_signature_params,
    add_signature_returns,
    add_signature_types,
    attach_module_symbols,
    common_prefix,
    format_example,
    hash_to_link,
    needs_signature,
    path_from_doclet,
    shorten_paths,
)
from .helper import (
    GLOBAL_NAME,
    Members,
    TemplateHelper,
    format_default,
    htmlsafe,
    is_module_exports,
    resolve_author_links,
)
from .logging import get_logger, publish_logging
from .models import Doclet
from .store import DocletStore
from .tutorials import Tutorial
from .view import Template

logger = get_logger("publisher")

CONTAINER_TEMPLATE = "container.html"
TUTORIAL_TEMPLATE = "tutorial.html"
DEFAULT_MAIN_PAGE_TITLE = "Main Page"


class Publisher:
    """Renders one doclet collection into a directory of HTML pages."""

    def __init__(
        self,
        store: DocletStore,
        options: PublishOptions,
        tutorials: Tutorial,
        config: TemplateConfig | None = None,
        *,
        base_dir: Path | None = None,
    ) -> None:
        self.store = store
        self.options = options
        self.tutorials = tutorials
        self.config = config or TemplateConfig()
        self.base_dir = (base_dir or Path.cwd()).resolve()
        self.outdir = (self.base_dir / options.destination).resolve()
        self.template_path = (self.base_dir / options.template).resolve()
        self.helper = TemplateHelper()
        self.view = Template(self.template_path / "tmpl")

    def run(self) -> Path:
        with publish_logging(verbose=self.options.verbose, log_file=self.options.log_file):
            return self._run()

    def _run(self) -> Path:
        helper = self.helper
        store = self.store.prune(include_private=self.options.include_private)
        store.sort("longname", "version", "since")
        logger.info("Publishing %d doclets to %s", len(store), self.outdir)
        self.outdir.mkdir(parents=True, exist_ok=True)

        # Claim the special filenames before any doclet can take them.
        # "index" is not registered as a link since it is also a valid longname.
        index_url = helper.get_unique_filename("index")
        global_url = helper.get_unique_filename(GLOBAL_NAME)
        helper.register_link(GLOBAL_NAME, global_url)

        self._setup_view()
        helper.set_tutorials(self.tutorials)
        helper.add_event_listeners(store)

        source_files = self._collect_source_files()
        self._copy_static_files()
        self._enrich_doclets(source_files)

        # every page, source listings included, shares the layout navigation
        members = helper.get_members(store)
        members.tutorials = list(self.tutorials.children)
        attach_module_symbols(
            store.find({"kind": ["class", "function"], "longname": {"left": "module:"}}),
            members.modules,
        )
        self.view.members = members

        if self.view.output_source_files:
            self.generate_source_files(source_files, self.options.encoding)

        packages = store.find({"kind": "package"})
        files = store.find({"kind": "file"})
        title = self.options.mainpagetitle or DEFAULT_MAIN_PAGE_TITLE
        mainpage = Doclet(kind="mainpage", readme=self.options.readme, longname=title)
        index_docs = packages + [mainpage] + files

        self.generate("", "Home", index_docs, index_url)
        if members.globals:
            self.generate("", "Global", [Doclet(kind="globalobj")], global_url)

        self._generate_member_pages(members)
        self._save_tutorial_children(self.tutorials)
        return self.outdir

    def generate(
        self,
        page_type: str,
        title: str,
        docs: Sequence[Doclet],
        filename: str,
        resolve_links: bool = True,
    ) -> Path:
        """Render the container template for ``docs`` and write it to ``filename``."""
        data = {"type": page_type, "title": title, "docs": list(docs)}
        html = self.view.render(CONTAINER_TEMPLATE, data)
        if resolve_links:
            html = self.helper.resolve_links(html)
        return self._write(filename, html)

    def generate_source_files(self, source_files: Dict[str, SourceFile], encoding: str) -> None:
        for path, source in source_files.items():
            shortened = source.shortened or path
            # doclets link to their source through meta.shortpath
            outfile = self.helper.get_unique_filename(shortened)
            self.helper.register_link(shortened, outfile)

            docs: List[Doclet] = []
            try:
                code = Path(source.resolved).read_text(encoding=encoding)
            except (OSError, UnicodeDecodeError) as exc:
                logger.error("Error while generating source file %s: %s", path, exc)
            else:
                docs.append(Doclet(kind="source", code=htmlsafe(code)))

            self.generate("Source", shortened, docs, outfile, resolve_links=False)

    def generate_tutorial(self, title: str, tutorial: Tutorial, filename: str) -> Path:
        data = {
            "title": title,
            "header": tutorial.title,
            "content": tutorial.parse(),
            "children": tutorial.children,
        }
        html = self.view.render(TUTORIAL_TEMPLATE, data)
        # {@link} works inside tutorials as well
        html = self.helper.resolve_links(html)
        return self._write(filename, html)

    def tutoriallink(self, name: str) -> str:
        return self.helper.to_tutorial(name, tag="em", classname="disabled", prefix="Tutorial: ")

    # ------------------------------------------------------------------
    # Internal helpers

    def _setup_view(self) -> None:
        view = self.view
        if self.config.layout_file:
            view.set_layout_file(self._resolve_resource(self.config.layout_file))

        view.find = self.store.find
        view.linkto = self.helper.linkto
        view.resolve_author_links = resolve_author_links
        view.tutoriallink = self.tutoriallink
        view.htmlsafe = htmlsafe
        view.format_default = format_default
        view.output_source_files = self.config.output_source_files
        view.use_longname_in_nav = self.config.use_longname_in_nav
        view.hide_return_values = self.config.hide_return_values
        view.members = Members()

    def _collect_source_files(self) -> Dict[str, SourceFile]:
        source_files: Dict[str, SourceFile] = {}
        for doclet in self.store:
            doclet.attribs = ""
            if doclet.examples:
                doclet.examples = [
                    format_example(example) if isinstance(example, str) else example
                    for example in doclet.examples
                ]
            if doclet.see:
                doclet.see = [hash_to_link(self.helper, doclet, item) for item in doclet.see]

            source_path = path_from_doclet(doclet)
            if source_path is not None and source_path not in source_files:
                source_files[source_path] = SourceFile(resolved=source_path)

        if source_files:
            shorten_paths(source_files, common_prefix(list(source_files)))
        return source_files

    def _copy_static_files(self) -> None:
        copied = copy_theme_static(self.template_path, self.outdir)
        logger.debug("Copied %d template static files", len(copied))
        if self.config.static_files is not None:
            copied = copy_user_static(self.config.static_files, self.outdir, base_dir=self.base_dir)
            logger.debug("Copied %d user static files", len(copied))

    def _enrich_doclets(self, source_files: Dict[str, SourceFile]) -> None:
        helper = self.helper
        for doclet in self.store:
            helper.register_link(doclet.longname, helper.create_link(doclet))

            source_path = path_from_doclet(doclet)
            if doclet.meta is not None and source_path in source_files:
                shortened = source_files[source_path].shortened
                if shortened:
                    doclet.meta.shortpath = shortened

            url = helper.longname_to_url[doclet.longname]
            doclet.id = url.split("#")[-1] if "#" in url else doclet.name

            if needs_signature(doclet):
                add_signature_params(doclet)
                add_signature_returns(
                    doclet, helper, hide_return_values=self.config.hide_return_values
                )
                add_attribs(doclet)

            doclet.ancestors = helper.get_ancestor_links(self.store, doclet)

            if doclet.kind in ("member", "constant"):
                add_signature_types(doclet, helper)
                add_attribs(doclet)
                # constants are listed with the other members
                doclet.kind = "member"

    def _generate_member_pages(self, members: Members) -> None:
        groups = (
            ("Module", members.modules),
            ("Class", members.classes),
            ("Namespace", members.namespaces),
            ("Mixin", members.mixins),
            ("External", members.externals),
            ("Interface", members.interfaces),
        )
        for longname in list(self.helper.longname_to_url):
            for title, doclets in groups:
                matches = [doclet for doclet in doclets if doclet.longname == longname]
                if title != "Module":
                    # module exports are shown on their module's page
                    matches = [doclet for doclet in matches if not is_module_exports(doclet)]
                if matches:
                    # registered urls are percent-encoded hrefs; pages are written under the decoded name
                    filename = unquote(self.helper.longname_to_url[longname])
                    self.generate(title, matches[0].name, matches, filename)

    def _save_tutorial_children(self, node: Tutorial) -> None:
        # a tutorial has a single parent, so the recursion cannot loop
        for child in node.children:
            filename = self.helper.tutorial_to_url(child.name)
            if filename is None:
                continue
            self.generate_tutorial(f"Tutorial: {child.title}", child, filename)
            self._save_tutorial_children(child)

    def _resolve_resource(self, resource: str) -> Path:
        for candidate in (self.base_dir / resource, self.template_path / resource):
            if candidate.is_file():
                return candidate
        raise FileNotFoundError(f"Layout file not found: {resource}")

    def _write(self, filename: str, html: str) -> Path:
        outpath = self.outdir / filename
        outpath.write_text(html, encoding=self.options.encoding)
        logger.debug("Wrote %s", outpath)
        return outpath


def publish(
    store: DocletStore,
    options: PublishOptions,
    tutorials: Tutorial,
    config: TemplateConfig | None = None,
    *,
    base_dir: Path | None = None,
) -> Path:
    """Entry point for hosts: render ``store`` and ``tutorials`` into ``options.destination``."""
    return Publisher(store, options, tutorials, config, base_dir=base_dir).run()


__all__ = ["Publisher", "publish"]
