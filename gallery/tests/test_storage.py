"""
Tests for gallery/storage.py
"""

from django.test import TestCase

from gallery import storage
from gallery.models import Category, Gif


def make_gif(slug, filename=None):
    return Gif.objects.create(
        slug=slug,
        filename=filename or f'{slug}.gif',
        original_name=f'{slug}.gif',
        mime_type='image/gif',
        size_bytes=10,
    )


class AddAssetTest(TestCase):
    """Tests for add_asset"""

    def test_creates_record(self):
        """Test add_asset creates a Gif row"""
        slug = storage.add_asset(
            slug='abcdefghij',
            filename='1-xyz.webp',
            original_name='clip.webp',
            mime_type='image/webp',
            size_bytes=123,
        )

        self.assertEqual(slug, 'abcdefghij')
        gif = Gif.objects.get(slug=slug)
        self.assertEqual(gif.size_bytes, 123)
        self.assertEqual(gif.extension, 'webp')


class GifQueryTest(TestCase):
    """Tests for listing, lookup and deletion"""

    def setUp(self):
        self.funny = Category.objects.create(name='funny')
        self.numeric = Category.objects.create(name='2024')
        self.a = make_gif('aaaaaaaaaa')
        self.b = make_gif('bbbbbbbbbb')
        self.a.categories.add(self.funny)
        self.b.categories.add(self.numeric)

    def test_list_gifs_newest_first(self):
        """Test list gifs newest first"""
        self.assertEqual([g.slug for g in storage.list_gifs()], ['bbbbbbbbbb', 'aaaaaaaaaa'])

    def test_by_category_name(self):
        """Test by category name"""
        self.assertEqual([g.slug for g in storage.gifs_by_category('funny')], ['aaaaaaaaaa'])

    def test_by_category_id(self):
        """Test by category id"""
        self.assertEqual(
            [g.slug for g in storage.gifs_by_category(str(self.funny.id))], ['aaaaaaaaaa']
        )

    def test_numeric_identifier_matches_name(self):
        """Test numeric identifier matches name"""
        self.assertIn('bbbbbbbbbb', [g.slug for g in storage.gifs_by_category('2024')])

    def test_unknown_category(self):
        """Test unknown category"""
        self.assertEqual(storage.gifs_by_category('nope'), [])

    def test_find_gif_by_slug(self):
        """Test find gif by slug"""
        self.assertEqual(storage.find_gif_by_slug('aaaaaaaaaa'), self.a)
        self.assertIsNone(storage.find_gif_by_slug('missing000'))

    def test_delete_gif_by_slug(self):
        """Test delete gif by slug"""
        self.assertTrue(storage.delete_gif_by_slug('aaaaaaaaaa'))
        self.assertFalse(storage.delete_gif_by_slug('aaaaaaaaaa'))
        self.assertEqual(Gif.objects.count(), 1)


class CategoryStorageTest(TestCase):
    """Tests for category management"""

    def test_add_category_trims(self):
        """Test add category trims"""
        category = storage.add_category('  reactions ')
        self.assertEqual(category.name, 'reactions')

    def test_add_category_requires_name(self):
        """Test add category requires name"""
        for name in ('', '   ', None, 42):
            with self.assertRaises(storage.CategoryNameRequired):
                storage.add_category(name)

    def test_add_category_duplicate(self):
        """Test add category duplicate"""
        storage.add_category('cats')
        with self.assertRaises(storage.CategoryNameDuplicate):
            storage.add_category('cats')

    def test_list_categories_counts(self):
        """Test list categories counts"""
        cats = storage.add_category('cats')
        storage.add_category('dogs')
        gif = make_gif('cccccccccc')
        gif.categories.add(cats)

        categories = storage.list_categories()

        self.assertEqual([(c.name, c.gif_count) for c in categories], [('cats', 1), ('dogs', 0)])

    def test_delete_category(self):
        """Test delete category"""
        category = storage.add_category('cats')
        self.assertTrue(storage.delete_category(category.id))
        self.assertFalse(storage.delete_category(category.id))


class SetGifCategoriesTest(TestCase):
    """Tests for set_gif_categories"""

    def setUp(self):
        self.gif = make_gif('dddddddddd')
        self.cats = storage.add_category('cats')
        self.dogs = storage.add_category('dogs')

    def test_replaces_categories_in_order(self):
        """Test replaces categories in order"""
        self.gif.categories.add(self.cats)

        result = storage.set_gif_categories('dddddddddd', [self.dogs.id, str(self.cats.id), self.dogs.id])

        self.assertEqual(
            result, [{'id': self.dogs.id, 'name': 'dogs'}, {'id': self.cats.id, 'name': 'cats'}]
        )
        self.assertEqual(set(self.gif.categories.values_list('name', flat=True)), {'cats', 'dogs'})

    def test_invalid_values_ignored(self):
        """Test invalid values ignored"""
        result = storage.set_gif_categories('dddddddddd', [True, 'x', -1, 0, 1.5, None])
        self.assertEqual(result, [])
        self.assertEqual(self.gif.categories.count(), 0)

    def test_non_list_clears(self):
        """Test non list clears"""
        self.gif.categories.add(self.cats)
        self.assertEqual(storage.set_gif_categories('dddddddddd', 'cats'), [])
        self.assertEqual(self.gif.categories.count(), 0)

    def test_unknown_category(self):
        """Test unknown category"""
        with self.assertRaises(storage.CategoryNotFound):
            storage.set_gif_categories('dddddddddd', [self.cats.id, 99999])

    def test_unknown_gif(self):
        """Test unknown gif"""
        self.assertIsNone(storage.set_gif_categories('missing000', [self.cats.id]))
