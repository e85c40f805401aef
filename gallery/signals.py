from django.db.models.signals import post_delete
from django.dispatch import receiver

from gallery.models import Gif


@receiver(post_delete, sender=Gif)
def cleanup_gif_file(sender, instance, **kwargs):
    """
    Delete the stored file when a Gif row is deleted.
    This handles both single and bulk deletions.
    """
    file_path = instance.get_absolute_file_path()
    try:
        file_path.unlink(missing_ok=True)
    except OSError as e:
        # Row is already gone; a stray file is harmless
        print(f"Error deleting file {file_path}: {e}")
