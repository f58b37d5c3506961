from __future__ import annotations

from typing import Dict, List


STATUS_GROUPS: Dict[str, List[Dict[str, str]]] = {
    "invoice": [
        {
            "key": "pending",
            "label": "بانتظار العروض",
            "description": "الفاتورة منشورة ولم يصلها أي عرض بعد.",
        },
        {
            "key": "priced",
            "label": "تم التسعير",
            "description": "وصل عرض واحد على الأقل ويتم تتبع أقل سعر.",
        },
        {
            "key": "approved",
            "label": "تمت الموافقة",
            "description": "تم اختيار التاجر الفائز وأغلقت الفاتورة أمام العروض.",
        },
    ],
}


ROLE_LABELS: Dict[str, str] = {
    "grocery": "بقالة",
    "merchant": "تاجر جملة",
    "admin": "مسؤول",
}


MESSAGES: Dict[str, Dict[str, str]] = {
    "success": {
        "registered": "تم إنشاء الحساب بنجاح.",
        "logged_in": "تم تسجيل الدخول.",
        "logged_out": "تم تسجيل الخروج.",
        "profile_updated": "تم تحديث البيانات.",
        "invoice_created": "تم إنشاء الفاتورة.",
        "bid_placed": "تم تقديم العرض.",
        "invoice_approved": "تمت الموافقة على الفاتورة.",
    },
    "error": {
        "actor_not_found": "المستخدم غير موجود.",
        "approve_not_allowed": "غير مسموح بالموافقة على هذه الفاتورة.",
        "auth_required": "غير مصرح - يرجى تسجيل الدخول.",
        "bid_already_placed": "لقد قدمت عرضاً مسبقاً على هذه الفاتورة.",
        "bid_incomplete": "بيانات غير كاملة.",
        "bid_not_found": "العرض غير موجود.",
        "conflict": "لا يمكن تنفيذ العملية في الحالة الحالية.",
        "invoice_access_denied": "غير مسموح.",
        "invoice_already_approved": "تمت الموافقة على هذه الفاتورة مسبقاً.",
        "invoice_not_found": "الفاتورة غير موجودة.",
        "items_invalid": "المنتجات غير صالحة.",
        "items_required": "يجب إضافة منتج واحد على الأقل.",
        "merchant_id_required": "يجب تحديد التاجر.",
        "method_not_allowed": "الطريقة غير مسموحة لهذا المسار.",
        "name_invalid": "الاسم غير صالح.",
        "no_changes": "لا توجد تعديلات.",
        "not_found": "العنصر غير موجود.",
        "permission_denied": "غير مسموح لهذا الدور.",
        "phone_already_registered": "رقم الهاتف مسجل مسبقاً.",
        "phone_invalid": "رقم الهاتف غير صالح.",
        "rate_limit_exceeded": "طلبات كثيرة. حاول مرة أخرى بعد قليل.",
        "role_invalid": "نوع الحساب غير صالح.",
        "route_not_found": "المسار غير موجود.",
        "total_price_invalid": "السعر الإجمالي غير صالح.",
        "unexpected_error": "تعذر إكمال العملية. حاول مرة أخرى بعد قليل.",
        "user_not_registered": "المستخدم غير مسجل.",
        "validation_error": "البيانات المرسلة غير صالحة.",
    },
}


def build_status_labels() -> Dict[str, str]:
    labels: Dict[str, str] = {}
    for group_items in STATUS_GROUPS.values():
        for item in group_items:
            labels[item["key"]] = item["label"]
    return labels


STATUS_LABELS = build_status_labels()


def status_label(status: str | None, default: str | None = None) -> str:
    key = str(status or "").strip()
    if key in STATUS_LABELS:
        return STATUS_LABELS[key]
    if default is not None:
        return default
    return key


def role_label(role: str | None) -> str:
    key = str(role or "").strip()
    return ROLE_LABELS.get(key, key)


def get_message(category: str, key: str, default: str | None = None) -> str:
    message = MESSAGES.get(category, {}).get(key)
    if message:
        return message
    if default is not None:
        return default
    return key


def error_message(key: str, default: str | None = None) -> str:
    return get_message("error", key, default)


def success_message(key: str, default: str | None = None) -> str:
    return get_message("success", key, default)
