import argparse
import json
import logging
from pathlib import Path

from detect_kit import BlobConfig, DetectionPostConfig, load_class_names, load_pipeline
from Smart_Fridge import (
    FridgeProfile,
    format_scan_report,
    load_fridge_profile,
    load_image,
    scan_fridge_items,
    scan_result_to_dict,
    suggest_recipes,
)


def main() -> int:
    parser = argparse.ArgumentParser(description="Scan a fridge photo and suggest recipes from the detected items.")
    parser.add_argument("--image", default="Media/fridge_image.jpg", help="Path to the fridge image.")
    parser.add_argument("--model", default="Models/yolov3.weights", help="Model weights (.weights/.onnx).")
    parser.add_argument("--model-config", default="Models/yolov3.cfg", help="Darknet .cfg (empty for ONNX).")
    parser.add_argument("--names", default="Models/coco.names", help="Class names (.names or metadata.yaml).")
    parser.add_argument("--profile", default=None, help="Fridge profile JSON (thresholds + recipes).")
    parser.add_argument("--backend", default=None, help="Force backend: opencv / onnxruntime.")
    parser.add_argument("--conf", type=float, default=None, help="Confidence threshold (overrides profile).")
    parser.add_argument("--iou", type=float, default=None, help="IoU threshold for NMS (overrides profile).")
    parser.add_argument("--per-class-nms", action="store_true", help="Suppress overlaps per class instead of jointly.")
    parser.add_argument("--imgsz", type=int, default=None, help="Network input size (overrides profile).")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON instead of text.")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...).")
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    profile = load_fridge_profile(Path(args.profile)) if args.profile else FridgeProfile()
    post_cfg = profile.post_config()
    post_cfg = DetectionPostConfig(
        conf_threshold=post_cfg.conf_threshold if args.conf is None else float(args.conf),
        score_threshold=post_cfg.score_threshold,
        iou_threshold=post_cfg.iou_threshold if args.iou is None else float(args.iou),
        per_class_suppression=post_cfg.per_class_suppression or bool(args.per_class_nms),
    )
    imgsz = profile.input_size if args.imgsz is None else int(args.imgsz)
    if imgsz < 32:
        raise ValueError("--imgsz must be >= 32")

    print("Smart Fridge App\n")

    try:
        loaded = load_image(args.image)
    except FileNotFoundError as exc:
        print(f"Error: Failed to load fridge image. {exc}")
        return 1

    pipeline = load_pipeline(
        model_path=args.model,
        config_path=args.model_config or None,
        backend=args.backend,
        blob_cfg=BlobConfig(size=(imgsz, imgsz)),
        post_cfg=post_cfg,
    )
    class_names = load_class_names(args.names) if args.names else {}

    print("Scanning items in the fridge...")
    items = scan_fridge_items(loaded.image, pipeline, class_names, unknown_label=profile.unknown_label)
    suggestions = suggest_recipes((item.name for item in items), profile.recipes)

    if args.json:
        print(json.dumps(scan_result_to_dict(items, suggestions), indent=2))
    else:
        print()
        print(format_scan_report(items, suggestions))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
