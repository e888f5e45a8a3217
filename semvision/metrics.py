"""Pixel-wise segmentation and object-wise detection quality of binary masks."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from scipy.ndimage import label

from semvision.semcv import read_image

_EIGHT_CONNECTED = np.ones((3, 3), dtype=bool)
_LUMA = np.array([0.299, 0.587, 0.114])
_MATCH_IOU = 0.5


@dataclass
class Stats:
    """Pixel counts of a segmentation compared with its ground truth."""

    tp: float = 0.0
    fp: float = 0.0
    fn: float = 0.0
    tn: float = 0.0

    def __add__(self, other):
        return Stats(
            self.tp + other.tp, self.fp + other.fp, self.fn + other.fn, self.tn + other.tn
        )


@dataclass
class DetectionStats:
    """Object counts of a detection compared with its ground truth."""

    tp: float = 0.0
    fn: float = 0.0
    fp: float = 0.0

    def __add__(self, other):
        return DetectionStats(self.tp + other.tp, self.fn + other.fn, self.fp + other.fp)


def safe_div(a, b):
    """``a / b`` when ``b`` is positive, otherwise zero."""
    return a / b if b > 0.0 else 0.0


def _check_shapes(mask_a, mask_b):
    if mask_a.shape != mask_b.shape:
        raise ValueError(f"mask shapes differ: {mask_a.shape} and {mask_b.shape}")


def iou(mask_a, mask_b):
    """Intersection over union of the non-zero pixels of two masks."""
    a, b = np.asarray(mask_a), np.asarray(mask_b)
    _check_shapes(a, b)
    inter = float(np.count_nonzero(np.bitwise_and(a, b)))
    union = float(np.count_nonzero(np.bitwise_or(a, b)))
    return inter / union if union > 0.0 else 0.0


def pixelwise(gt_mask, pred_mask):
    """Count pixels by their value (255 or 0) in the ground truth and the prediction."""
    gt, pred = np.asarray(gt_mask), np.asarray(pred_mask)
    _check_shapes(gt, pred)
    gt_on, gt_off = gt == 255, gt == 0
    pred_on, pred_off = pred == 255, pred == 0
    return Stats(
        tp=float(np.count_nonzero(gt_on & pred_on)),
        fp=float(np.count_nonzero(gt_off & pred_on)),
        fn=float(np.count_nonzero(gt_on & pred_off)),
        tn=float(np.count_nonzero(gt_off & pred_off)),
    )


def objectwise(gt_mask, pred_mask):
    """Match 8-connected objects; a ground-truth object is found when its best IoU exceeds 0.5."""
    gt, pred = np.asarray(gt_mask), np.asarray(pred_mask)
    _check_shapes(gt, pred)
    gt_labels, n_gt = label(gt != 0, structure=_EIGHT_CONNECTED)
    pr_labels, n_pr = label(pred != 0, structure=_EIGHT_CONNECTED)
    if n_gt == 0 or n_pr == 0:
        return DetectionStats(tp=0.0, fn=float(n_gt), fp=float(n_pr))

    width = n_pr + 1
    pairs = gt_labels.astype(np.int64) * width + pr_labels.astype(np.int64)
    inter = np.bincount(pairs.ravel(), minlength=(n_gt + 1) * width).reshape(n_gt + 1, width)
    inter = inter[1:, 1:].astype(np.float64)
    area_gt = np.bincount(gt_labels.ravel(), minlength=n_gt + 1)[1:].astype(np.float64)
    area_pr = np.bincount(pr_labels.ravel(), minlength=n_pr + 1)[1:].astype(np.float64)
    scores = inter / (area_gt[:, None] + area_pr[None, :] - inter)

    best = scores.argmax(axis=1)
    hits = scores[np.arange(n_gt), best] > _MATCH_IOU
    matched = np.unique(best[hits])
    return DetectionStats(
        tp=float(np.count_nonzero(hits)),
        fn=float(np.count_nonzero(~hits)),
        fp=float(n_pr - matched.size),
    )


def read_list(file_path):
    """The non-empty lines of a list file."""
    with open(file_path, encoding="utf-8") as handle:
        return [line for line in (raw.rstrip("\r\n") for raw in handle) if line]


def _scores(tp, fp, fn):
    precision = safe_div(tp, tp + fp)
    recall = safe_div(tp, tp + fn)
    f1 = safe_div(2 * precision * recall, precision + recall)
    return precision, recall, f1


def _section(title, tp, fp, fn):
    precision, recall, f1 = _scores(tp, fp, fn)
    return (
        f"[{title}]\n"
        f"Precision: {precision:g}\n"
        f"Recall   : {recall:g}\n"
        f"F1-score : {f1:g}\n"
    )


def format_report(seg, det):
    """The text report of segmentation and detection precision, recall and F1."""
    return (
        _section("SEGMENTATION", seg.tp, seg.fp, seg.fn)
        + "\n"
        + _section("DETECTION", det.tp, det.fp, det.fn)
    )


def _read_gray(path):
    img = read_image(path)
    if img.ndim == 3:
        if img.shape[2] >= 3:
            img = img[:, :, :3].astype(np.float64) @ _LUMA
        else:
            img = img[:, :, 0]
    if img.dtype == np.uint16:
        img = img >> 8
    return np.clip(np.rint(img.astype(np.float64)), 0, 255).astype(np.uint8)


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 3:
        print("Usage: metrics <gt.lst> <pred.lst> <lab_04.md>", file=sys.stderr)
        return 1
    gt_lst, pred_lst, report_path = args

    try:
        gt_list = read_list(gt_lst)
        pred_list = read_list(pred_lst)
    except OSError as exc:
        print(f"Error: cannot read list: {exc}", file=sys.stderr)
        return 2
    if len(gt_list) != len(pred_list):
        print("Error: list size mismatch.", file=sys.stderr)
        return 2

    seg = Stats()
    det = DetectionStats()
    for index, (gt_file, pred_file) in enumerate(zip(gt_list, pred_list)):
        try:
            gt_mask = _read_gray(gt_file)
            pred_mask = _read_gray(pred_file)
            pair_seg = pixelwise(gt_mask, pred_mask)
            pair_det = objectwise(gt_mask, pred_mask)
        except (OSError, ValueError):
            print(f"Warning: cannot read pair index {index}", file=sys.stderr)
            continue
        seg += pair_seg
        det += pair_det

    try:
        Path(report_path).write_text(format_report(seg, det), encoding="utf-8")
    except OSError:
        print(f"Error: failed to write report to {report_path}", file=sys.stderr)
        return 3
    print(f"Report written to {report_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())