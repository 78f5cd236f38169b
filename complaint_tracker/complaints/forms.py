import base64
from pathlib import Path

from django import forms
from django.core.exceptions import ValidationError

from .appeals import MIN_APPEAL_MESSAGE_LENGTH
from .records import RejectionReason, Severity, Status
from .workflow import MIN_REJECTION_COMMENT_LENGTH

ALLOWED_PHOTO_EXTENSIONS = {".jpg", ".jpeg", ".png"}
MAX_PHOTO_SIZE_BYTES = 5 * 1024 * 1024

CATEGORY_CHOICES = [
    ("Garbage Dump", "Garbage Dump"),
    ("Water Logging", "Water Logging"),
    ("Road Damage", "Road Damage"),
    ("Street Light", "Street Light"),
    ("Drainage", "Drainage"),
    ("Other", "Other"),
]


def validate_photo(file_obj):
    extension = Path(file_obj.name).suffix.lower()
    if extension not in ALLOWED_PHOTO_EXTENSIONS:
        raise ValidationError("Only JPG, JPEG, and PNG files are allowed.")
    if file_obj.size > MAX_PHOTO_SIZE_BYTES:
        raise ValidationError("Each file must be 5MB or smaller.")


def encode_photo(file_obj) -> str:
    if not file_obj:
        return ""
    content_type = getattr(file_obj, "content_type", "") or "image/jpeg"
    encoded = base64.b64encode(file_obj.read()).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


class ComplaintSubmissionForm(forms.Form):
    citizen_name = forms.CharField(
        max_length=100,
        widget=forms.TextInput(attrs={"class": "form-control", "placeholder": "Your name"}),
    )
    citizen_phone = forms.RegexField(
        regex=r"^\+?\d{10,13}$",
        error_messages={"invalid": "Enter a valid phone number."},
        widget=forms.TextInput(attrs={"class": "form-control", "placeholder": "Phone number"}),
    )
    category = forms.ChoiceField(choices=CATEGORY_CHOICES, widget=forms.Select(attrs={"class": "form-select"}))
    severity = forms.ChoiceField(
        choices=Severity.choices,
        initial=Severity.MEDIUM,
        widget=forms.Select(attrs={"class": "form-select"}),
    )
    ward = forms.CharField(max_length=50, widget=forms.TextInput(attrs={"class": "form-control"}))
    zone = forms.CharField(max_length=50, required=False, widget=forms.TextInput(attrs={"class": "form-control"}))
    description = forms.CharField(widget=forms.Textarea(attrs={"class": "form-control", "rows": 5}))
    photo = forms.FileField(
        required=False,
        validators=[validate_photo],
        widget=forms.ClearableFileInput(attrs={"class": "form-control", "accept": ".jpg,.jpeg,.png"}),
    )

    def to_fields(self):
        data = self.cleaned_data
        return {
            "citizen": {"name": data["citizen_name"].strip(), "phone": data["citizen_phone"]},
            "category": data["category"],
            "severity": data["severity"],
            "ward": data["ward"].strip(),
            "zone": data["zone"].strip(),
            "description": data["description"].strip(),
            "photo_reference": encode_photo(data.get("photo")),
        }


class StaffStatusUpdateForm(forms.Form):
    status = forms.ChoiceField(choices=Status.choices, widget=forms.Select(attrs={"class": "form-select"}))
    comment = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 3, "placeholder": "Officer comment"}),
    )
    eta = forms.CharField(max_length=50, required=False, widget=forms.TextInput(attrs={"class": "form-control"}))
    department = forms.CharField(
        max_length=100,
        required=False,
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
    rejection_reason = forms.ChoiceField(
        choices=[("", "---------")] + RejectionReason.choices,
        required=False,
        widget=forms.Select(attrs={"class": "form-select"}),
    )
    rejection_reason_other = forms.CharField(
        max_length=200,
        required=False,
        widget=forms.TextInput(attrs={"class": "form-control", "placeholder": "Describe the reason"}),
    )

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get("status") != Status.REJECTED:
            return cleaned_data
        if not cleaned_data.get("rejection_reason"):
            self.add_error("rejection_reason", "A rejection reason is required.")
        elif cleaned_data["rejection_reason"] == RejectionReason.OTHER and not cleaned_data.get(
            "rejection_reason_other", ""
        ).strip():
            self.add_error("rejection_reason_other", "Please describe the rejection reason.")
        if len(cleaned_data.get("comment", "").strip()) < MIN_REJECTION_COMMENT_LENGTH:
            self.add_error(
                "comment",
                f"Rejection comment must be at least {MIN_REJECTION_COMMENT_LENGTH} characters.",
            )
        return cleaned_data


class AppealForm(forms.Form):
    appeal_message = forms.CharField(
        min_length=MIN_APPEAL_MESSAGE_LENGTH,
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 4}),
    )
    appeal_photo = forms.FileField(
        required=False,
        validators=[validate_photo],
        widget=forms.ClearableFileInput(attrs={"class": "form-control", "accept": ".jpg,.jpeg,.png"}),
    )

    def clean_appeal_message(self):
        message = self.cleaned_data["appeal_message"].strip()
        if len(message) < MIN_APPEAL_MESSAGE_LENGTH:
            raise ValidationError(f"Appeal message must be at least {MIN_APPEAL_MESSAGE_LENGTH} characters.")
        return message
