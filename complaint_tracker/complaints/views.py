from django.contrib import messages
from django.contrib.auth.mixins import LoginRequiredMixin, UserPassesTestMixin
from django.core.exceptions import PermissionDenied
from django.http import Http404
from django.shortcuts import redirect, render
from django.utils.http import urlencode
from django.views import View
from django.views.generic import ListView, TemplateView

from .filters import apply_complaint_filters, sort_complaints, summarize_by_status
from .forms import CATEGORY_CHOICES, AppealForm, ComplaintSubmissionForm, StaffStatusUpdateForm, encode_photo
from .records import COMPLAINT_ID_PATTERN, Status
from .results import ErrorKind
from .services import get_appeal_service, get_repository, get_workflow

FILTER_PARAMS = ("q", "status", "category", "ward", "zone")


def form_error_messages(*forms):
    errors = []
    for form in forms:
        errors.extend(form.errors.get("__all__", []))
        for field, field_errors in form.errors.items():
            if field != "__all__":
                errors.extend([f"{field}: {error}" for error in field_errors])
    return errors


class StaffRequiredMixin(LoginRequiredMixin, UserPassesTestMixin):
    def test_func(self):
        return self.request.user.is_staff

    def handle_no_permission(self):
        if self.request.user.is_authenticated:
            raise PermissionDenied("Staff access required.")
        return super().handle_no_permission()


class ComplaintCreateView(View):
    template_name = "complaints/complaint_create.html"

    def get(self, request):
        return render(request, self.template_name, {"form": ComplaintSubmissionForm()})

    def post(self, request):
        form = ComplaintSubmissionForm(request.POST, request.FILES)
        if not form.is_valid():
            return render(request, self.template_name, {"form": form})

        result = get_repository().create(form.to_fields())
        if not result:
            messages.error(request, "We could not save your complaint right now. Please try again.")
            return render(request, self.template_name, {"form": form})

        complaint = result.complaint
        messages.success(request, f"Complaint submitted successfully. Reference: {complaint.id}")
        return redirect("complaints:complaint_detail", complaint_id=complaint.id)


class ComplaintTrackView(View):
    def get(self, request):
        complaint_id = request.GET.get("complaint_id", "").strip()
        if not complaint_id:
            messages.error(request, "Enter a complaint reference to track.")
            return redirect("complaints:complaint_create")
        if not COMPLAINT_ID_PATTERN.match(complaint_id):
            messages.error(request, f"No complaint found with reference {complaint_id}.")
            return redirect("complaints:complaint_create")
        return redirect("complaints:complaint_detail", complaint_id=complaint_id)


class ComplaintDetailView(TemplateView):
    template_name = "complaints/complaint_detail.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        result = get_repository().get_by_id(self.kwargs["complaint_id"])
        if not result:
            raise Http404(result.message)
        complaint = result.complaint
        context["complaint"] = complaint
        context["timeline"] = complaint.timeline
        if complaint.can_raise_appeal():
            context["appeal_form"] = AppealForm()
        if self.request.user.is_staff:
            context["staff_update_form"] = StaffStatusUpdateForm(initial={"status": complaint.status})
            context["audit_log"] = complaint.audit_log
        return context


class ComplaintAppealView(View):
    def post(self, request, complaint_id):
        form = AppealForm(request.POST, request.FILES)
        if not form.is_valid():
            for error in form_error_messages(form):
                messages.error(request, error)
            return redirect("complaints:complaint_detail", complaint_id=complaint_id)

        result = get_appeal_service().raise_appeal(
            complaint_id,
            form.cleaned_data["appeal_message"],
            encode_photo(form.cleaned_data.get("appeal_photo")),
        )
        if result:
            messages.success(request, "Your appeal has been submitted for review.")
        elif result.error == ErrorKind.NOT_FOUND:
            raise Http404(result.message)
        else:
            messages.error(request, result.message)
        return redirect("complaints:complaint_detail", complaint_id=complaint_id)

    def get(self, request, complaint_id):
        return redirect("complaints:complaint_detail", complaint_id=complaint_id)


class StaffDashboardView(StaffRequiredMixin, ListView):
    template_name = "complaints/complaint_staff_dashboard.html"
    context_object_name = "complaints"
    paginate_by = 10

    def get_queryset(self):
        self.all_complaints = get_repository().get_all()
        return sort_complaints(apply_complaint_filters(self.all_complaints, self.request.GET))

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["categories"] = CATEGORY_CHOICES
        context["statuses"] = Status.choices
        context["summary"] = summarize_by_status(self.all_complaints)
        context["filters"] = {name: self.request.GET.get(name, "") for name in FILTER_PARAMS}
        context["filter_query"] = urlencode({name: value for name, value in context["filters"].items() if value})
        return context


class StaffComplaintUpdateView(StaffRequiredMixin, View):
    def post(self, request, complaint_id):
        form = StaffStatusUpdateForm(request.POST)
        if not form.is_valid():
            for error in form_error_messages(form):
                messages.error(request, error)
            return redirect("complaints:complaint_detail", complaint_id=complaint_id)

        result = get_workflow().update_status(
            complaint_id,
            form.cleaned_data["status"],
            comment=form.cleaned_data["comment"],
            eta=form.cleaned_data["eta"],
            department=form.cleaned_data["department"],
            rejection_reason=form.cleaned_data["rejection_reason"],
            rejection_reason_other=form.cleaned_data["rejection_reason_other"],
            admin=request.user.get_username(),
        )
        if result:
            messages.success(request, "Complaint updated successfully.")
        elif result.error == ErrorKind.NOT_FOUND:
            raise Http404(result.message)
        else:
            messages.error(request, result.message)
        return redirect("complaints:complaint_detail", complaint_id=complaint_id)

    def get(self, request, complaint_id):
        return redirect("complaints:complaint_detail", complaint_id=complaint_id)


class StaffEscalateView(StaffRequiredMixin, View):
    def post(self, request, complaint_id):
        result = get_workflow().escalate(complaint_id, admin=request.user.get_username())
        if result:
            messages.success(request, "Complaint escalated to higher authority.")
        elif result.error == ErrorKind.NOT_FOUND:
            raise Http404(result.message)
        else:
            messages.error(request, result.message)
        return redirect("complaints:staff_dashboard")
