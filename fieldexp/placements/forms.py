from decimal import Decimal

from django import forms

from .models import School, SchoolQuota, Subject


class StudentIdForm(forms.Form):
    """Step 1 of registration: the student types their ID."""

    student_id = forms.CharField(
        max_length=50,
        label='Student ID',
        widget=forms.TextInput(attrs={
            'placeholder': 'Enter your student ID',
            'autofocus': True,
        }),
    )

    def clean_student_id(self):
        value = self.cleaned_data['student_id'].strip()
        if not value:
            raise forms.ValidationError('Please enter your student ID.')
        return value


class SchoolFilterForm(forms.Form):
    """
    GET filters on the school selection page.  Changing `subject` re-queries
    the database; `q` is matched against the fetched list.
    """

    subject = forms.ChoiceField(
        choices=[('', 'All subjects')] + list(Subject.choices),
        required=False,
        label='Filter by Subject (Optional)',
    )
    q = forms.CharField(
        required=False,
        label='Search',
        widget=forms.TextInput(attrs={'placeholder': 'Search by school name or location...'}),
    )


class SchoolForm(forms.ModelForm):
    """
    Admin form for adding a partner school.  Existing schools are not edited;
    they are deleted and added again.
    """

    class Meta:
        model  = School
        fields = [
            'name',
            'location',
            'address',
            'min_gpa',
            'latitude',
            'longitude',
        ]
        widgets = {
            'name':      forms.TextInput(attrs={'placeholder': 'e.g. SMA Negeri 1 Jakarta'}),
            'location':  forms.TextInput(attrs={'placeholder': 'e.g. Jakarta Pusat'}),
            'address':   forms.Textarea(attrs={'rows': 2, 'placeholder': 'Full street address (optional)'}),
            'min_gpa':   forms.NumberInput(attrs={'step': '0.01', 'min': '0', 'max': '4'}),
            'latitude':  forms.NumberInput(attrs={'step': '0.000001', 'placeholder': '-6.200000'}),
            'longitude': forms.NumberInput(attrs={'step': '0.000001', 'placeholder': '106.816666'}),
        }
        labels = {
            'name':      'School Name',
            'location':  'Location',
            'address':   'Address (optional)',
            'min_gpa':   'Minimum GPA',
            'latitude':  'Latitude (optional)',
            'longitude': 'Longitude (optional)',
        }
        help_texts = {
            'min_gpa': '0 – 4.  Leave at 0 for no requirement.',
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['min_gpa'].required = False
        self.fields['min_gpa'].initial = Decimal('0')

    def clean_min_gpa(self):
        value = self.cleaned_data.get('min_gpa')
        return Decimal('0') if value is None else value

    def clean(self):
        cleaned = super().clean()
        latitude  = cleaned.get('latitude')
        longitude = cleaned.get('longitude')
        if (latitude is None) != (longitude is None) and not self.has_error('latitude') \
                and not self.has_error('longitude'):
            raise forms.ValidationError('Enter both latitude and longitude, or neither.')
        return cleaned


class QuotaForm(forms.ModelForm):
    """Admin form for opening a subject quota at a school."""

    school = forms.ModelChoiceField(
        queryset=School.objects.order_by('name'),
        empty_label='— select school —',
        label='School',
    )
    subject = forms.ChoiceField(
        choices=[('', '— select subject —')] + list(Subject.choices),
        label='Subject',
        error_messages={'required': 'Please select a subject'},
    )

    class Meta:
        model  = SchoolQuota
        fields = ['school', 'subject', 'total_quota']
        widgets = {
            'total_quota': forms.NumberInput(attrs={'min': '0', 'step': '1'}),
        }
        labels = {
            'total_quota': 'Total Quota',
        }


class QuotaEditForm(forms.ModelForm):
    """Once a quota exists only its capacity can change."""

    class Meta:
        model  = SchoolQuota
        fields = ['total_quota']
        widgets = {
            'total_quota': forms.NumberInput(attrs={'min': '0', 'step': '1'}),
        }
        labels = {
            'total_quota': 'Total Quota',
        }
