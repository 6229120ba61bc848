"""Small example showing `ImagePipeline` usage with in-memory images and a progress subscriber.

Run directly to see output:
    python examples/pipeline_example.py
"""
import io

from PIL import Image

from images_to_docx import ImagePipeline, ProgressTracker, RawImageInput


def make_jpeg(color, size=(1200, 900)):
    buf = io.BytesIO()
    Image.new("RGB", size, color=color).save(buf, format="JPEG")
    return buf.getvalue()


def main():
    files = [
        RawImageInput(f"swatch_{i}.jpg", "image/jpeg", make_jpeg((40 * i, 90, 200 - 30 * i)))
        for i in range(5)
    ]
    tracker = ProgressTracker()
    tracker.subscribe(lambda s: print(f"progress: {s.current}/{s.total}"))

    artifact = ImagePipeline(progress=tracker, quiet=True).run(files)
    with open(artifact.filename, "wb") as f:
        f.write(artifact.data)
    print("Saved", artifact.filename, len(artifact.data), "bytes")


if __name__ == "__main__":
    main()
