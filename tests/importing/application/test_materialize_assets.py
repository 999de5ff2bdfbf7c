import unittest

from readme_importer.importing.application.workflows.materialize_assets import (
    AssetMaterializer,
    MaterializeConfig,
    allocate_filenames,
    substitute_references,
)
from readme_importer.importing.domain.errors import FetchError, StorageError
from readme_importer.importing.domain.models import AssetReference, ReadmeDocument, RepositoryReference
from readme_importer.importing.infrastructure.vault_store import VaultAssetStore
from tests.utils.tempdir import managed_temp_dir

LOGO = "https://github.com/acme/widgets/blob/main/images/logo.png?raw=true"
BADGE = "https://img.shields.io/badge/build-passing-green.svg"
REF = RepositoryReference("acme", "widgets")


class FakeAssetClient:
    def __init__(self, assets: dict[str, bytes | Exception]) -> None:
        self.assets = assets
        self.fetched: list[str] = []

    async def fetch_readme(self, _session, _reference):
        raise AssertionError("not used")

    async def fetch_asset(self, _session, url: str) -> bytes:
        self.fetched.append(url)
        payload = self.assets[url]
        if isinstance(payload, Exception):
            raise payload
        return payload


class FakeStore:
    def __init__(self, fail_on: set[str] | None = None) -> None:
        self.fail_on = fail_on or set()
        self.ensured = 0
        self.written: dict[str, bytes] = {}

    def ensure_container(self):
        self.ensured += 1

    def write(self, filename: str, data: bytes) -> str:
        if filename in self.fail_on:
            raise StorageError(f"assets/{filename}", "disk full")
        self.written[filename] = data
        return f"assets/{filename}"


def make_materializer(client, store) -> AssetMaterializer:
    return AssetMaterializer(client=client, store=store, config=MaterializeConfig(show_progress=False))


def readme(content: str) -> ReadmeDocument:
    return ReadmeDocument(REF, content)


class AllocateFilenamesTests(unittest.TestCase):
    def test_collisions_get_a_suffix(self):
        names = allocate_filenames(
            ["https://a.example.com/x/logo.png", "https://b.example.com/y/logo.png", "https://c.example.com/logo.png"]
        )
        self.assertEqual(
            list(names.values()),
            ["logo.png", "logo_2.png", "logo_3.png"],
        )


class SubstituteReferencesTests(unittest.TestCase):
    def test_replaced_text_is_not_matched_again(self):
        refs = (
            AssetReference("logo.png", "assets/logo.png"),
            AssetReference("https://cdn.example.com/logo.png", "assets/logo_2.png"),
        )
        self.assertEqual(
            substitute_references("![a](logo.png) ![b](https://cdn.example.com/logo.png)", refs),
            "![a](assets/logo.png) ![b](assets/logo_2.png)",
        )

    def test_nothing_to_replace(self):
        self.assertEqual(substitute_references("text", ()), "text")


class AssetMaterializerTests(unittest.IsolatedAsyncioTestCase):
    async def test_download_and_store_returns_local_path(self):
        client = FakeAssetClient({LOGO: b"png"})
        store = FakeStore()

        local_path = await make_materializer(client, store).download_and_store(None, LOGO)

        self.assertEqual(local_path, "assets/logo.png")
        self.assertEqual(store.written, {"logo.png": b"png"})
        self.assertEqual(store.ensured, 1)

    async def test_every_occurrence_is_replaced_and_fetched_once(self):
        client = FakeAssetClient({LOGO: b"png"})
        store = FakeStore()
        content = f"![logo]({LOGO})\n<img src=\"{LOGO}\">\n"

        result = await make_materializer(client, store).materialize(None, readme(content))

        self.assertEqual(result.content, '![logo](assets/logo.png)\n<img src="assets/logo.png">\n')
        self.assertEqual(client.fetched, [LOGO])
        self.assertEqual(result.stored, (AssetReference(LOGO, "assets/logo.png"),))
        self.assertEqual(result.failed, ())

    async def test_failed_download_is_skipped(self):
        client = FakeAssetClient({LOGO: b"png", BADGE: FetchError(BADGE, status=404)})
        store = FakeStore()
        content = f"![build]({BADGE})\n![logo]({LOGO})"

        result = await make_materializer(client, store).materialize(None, readme(content))

        self.assertEqual(result.content, f"![build]({BADGE})\n![logo](assets/logo.png)")
        self.assertEqual(result.failed, (BADGE,))
        self.assertEqual(len(result.stored), 1)

    async def test_storage_failure_is_skipped(self):
        client = FakeAssetClient({LOGO: b"png", BADGE: b"svg"})
        store = FakeStore(fail_on={"logo.png"})
        content = f"![build]({BADGE}) ![logo]({LOGO})"

        result = await make_materializer(client, store).materialize(None, readme(content))

        self.assertEqual(result.content, f"![build](assets/build-passing-green.svg) ![logo]({LOGO})")
        self.assertEqual(result.failed, (LOGO,))

    async def test_relative_references_resolve_against_the_repository(self):
        client = FakeAssetClient({LOGO: b"png"})
        store = FakeStore()
        content = '![logo](images/logo.png)\n<img src="images/logo.png">'

        result = await make_materializer(client, store).materialize(None, readme(content))

        self.assertEqual(result.content, '![logo](assets/logo.png)\n<img src="assets/logo.png">')
        self.assertEqual(client.fetched, [LOGO])
        self.assertEqual(result.stored, (AssetReference("images/logo.png", "assets/logo.png"),))

    async def test_same_asset_written_two_ways_is_fetched_once(self):
        client = FakeAssetClient({LOGO: b"png"})
        store = FakeStore()
        content = f"![a](images/logo.png) ![b]({LOGO})"

        result = await make_materializer(client, store).materialize(None, readme(content))

        self.assertEqual(result.content, "![a](assets/logo.png) ![b](assets/logo.png)")
        self.assertEqual(client.fetched, [LOGO])
        self.assertEqual(len(result.stored), 2)

    async def test_unresolvable_references_are_left_alone(self):
        client = FakeAssetClient({})
        store = FakeStore()
        content = "![dot](data:image/png;base64,AAAA)"

        result = await make_materializer(client, store).materialize(None, readme(content))

        self.assertEqual(result.content, content)
        self.assertEqual(client.fetched, [])
        self.assertEqual(store.ensured, 0)

    async def test_unexpected_errors_propagate(self):
        client = FakeAssetClient({LOGO: RuntimeError("bug")})

        with self.assertRaises(RuntimeError):
            await make_materializer(client, FakeStore()).materialize(None, readme(f"![logo]({LOGO})"))

    async def test_writes_into_vault_assets_folder(self):
        with managed_temp_dir("materialize_vault") as tmp:
            client = FakeAssetClient({LOGO: b"\x89PNG"})
            materializer = make_materializer(client, VaultAssetStore(tmp))

            result = await materializer.materialize(None, readme(f"![logo]({LOGO})"))

            self.assertEqual(result.content, "![logo](assets/logo.png)")
            self.assertEqual((tmp / "assets" / "logo.png").read_bytes(), b"\x89PNG")

    async def test_relative_and_absolute_names_do_not_collide(self):
        cdn = "https://cdn.example.com/logo.png"
        client = FakeAssetClient({LOGO.replace("images/", ""): b"one", cdn: b"two"})
        store = FakeStore()

        result = await make_materializer(client, store).materialize(None, readme(f"![a](logo.png) ![b]({cdn})"))

        self.assertEqual(result.content, "![a](assets/logo.png) ![b](assets/logo_2.png)")
        self.assertEqual(store.written, {"logo.png": b"one", "logo_2.png": b"two"})
